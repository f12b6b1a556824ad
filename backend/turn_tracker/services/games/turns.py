from flask import current_app

from turn_tracker import db
from turn_tracker.broadcast import emit_to_game
from turn_tracker.errors import ConflictError, NotFoundError, TurnOrderError, ValidationError
from turn_tracker.models import TurnHistory, utcnow
from .status import GameStatus, set_status
from .transaction import game_transaction
from .turn_order import all_passed, next_seat, snapshot, turn_order_domain

TURN_ACTIONS = ('end_turn', 'pass')


def _elapsed_ms(start, end) -> int:
    return max(0, int((end - start).total_seconds() * 1000))


def record_turn(game_id, player_id, action, turn_duration_ms=None, expected_version=None):
    """End the acting player's turn, or record their pass.

    Appends an immutable history row, accrues the player's clock, then
    either pauses the game (everybody has passed) or hands the turn to
    the next unpassed seat. Returns ``(game, turn_history, next_player)``;
    ``next_player`` is None when the round finished.
    """
    if action not in TURN_ACTIONS:
        raise ValidationError(f"action must be one of: {', '.join(TURN_ACTIONS)}", details={'action': action})
    if turn_duration_ms is not None and (isinstance(turn_duration_ms, bool) or turn_duration_ms < 0):
        raise ValidationError('turn_duration_ms must be a non-negative integer')

    with game_transaction(game_id, expected_version=expected_version) as game:
        player = next((p for p in game.players if p.id == player_id), None)
        if player is None:
            raise NotFoundError('Player not found', details={'player_id': player_id})
        if game.status != GameStatus.ACTIVE.value:
            raise ConflictError(f'Game is {game.status}; turns can only be recorded while active')
        if player.turn_order != game.current_player_turn_order:
            raise ConflictError(
                f'It is not {player.name}\'s turn',
                code='NOT_YOUR_TURN',
                details={'player_id': player.id, 'current_player_turn_order': game.current_player_turn_order},
            )

        now = utcnow()
        last = game.history.order_by(TurnHistory.created_at.desc(), TurnHistory.id.desc()).first()
        started_at = last.turn_ended_at if last else game.created_at
        duration = int(turn_duration_ms) if turn_duration_ms is not None else _elapsed_ms(started_at, now)

        entry = TurnHistory(
            game_id=game.id,
            player_id=player.id,
            player_name=player.name,
            player_color=player.color,
            round_number=game.current_round,
            turn_number=game.current_turn,
            turn_started_at=started_at,
            turn_ended_at=now,
            turn_duration_ms=duration,
            action=action,
            created_at=now,
        )
        db.session.add(entry)

        player.total_time_ms = (player.total_time_ms or 0) + duration
        if action == 'pass':
            player.has_passed = True

        seats = snapshot(game.players)
        next_player = None
        if all_passed(seats):
            set_status(game, GameStatus.PAUSED)
        else:
            seat = next_seat(seats, player.turn_order, turn_order_domain())
            if seat is None:
                raise TurnOrderError(
                    'Unpassed players exist but none holds a turn order in the domain',
                    details={'game_id': game.id, 'turn_orders': [s.turn_order for s in seats]},
                )
            next_player = next(p for p in game.players if p.id == seat.player_id)
            game.current_player_turn_order = seat.turn_order
            game.current_turn = game.current_turn + 1
            game.turn_started_at = now
        db.session.add(game)

    current_app.logger.info(
        f"[turn] game={game.id} round={entry.round_number} turn={entry.turn_number} "
        f"player={entry.player_id} action={action} duration_ms={duration} "
        f"next={next_player.id if next_player else None}"
    )
    state = game.to_dict()
    if next_player is None:
        current_app.logger.info(f"[all_passed] game={game.id} round={game.current_round} paused")
        emit_to_game(game.id, 'all_passed', {'game': state, 'turn_history': entry.to_dict()})
    else:
        emit_to_game(game.id, 'turn_ended', {
            'game': state,
            'turn_history': entry.to_dict(),
            'next_player_id': next_player.id,
        })
    return game, entry, next_player
