"""Game lifecycle and administrative corrections."""

from flask import current_app

from turn_tracker import db
from turn_tracker.broadcast import emit_to_game
from turn_tracker.errors import ConflictError, NotFoundError, ValidationError
from turn_tracker.models import Game, Round, StrategyCardPick, TurnHistory, utcnow
from .players import assign_speaker
from .status import GameStatus, parse_status, set_status
from .transaction import game_transaction, get_game_or_404
from .turn_order import all_passed, first_seat, next_seat, snapshot, turn_order_domain

GAME_FIELDS = ('status', 'current_turn', 'current_round', 'current_player_turn_order', 'speaker_player_id')


def create_game():
    game = Game(status=GameStatus.SETUP.value)
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[create] game={game.id}")
    return game


def list_games(limit=None):
    if limit is None:
        limit = current_app.config.get('GAME_LIST_LIMIT', 20)
    return Game.query.order_by(Game.created_at.desc(), Game.id.desc()).limit(limit).all()


def _activate(game):
    """setup -> active: seat the lowest turn order and start its clock."""
    min_players = int(current_app.config.get('MIN_PLAYERS', 2))
    if len(game.players) < min_players:
        raise ConflictError(f'At least {min_players} players are required to start')
    seat = first_seat(snapshot(game.players), turn_order_domain())
    if seat is None:
        raise ConflictError('No player holds a valid turn order')
    game.current_player_turn_order = seat.turn_order
    game.turn_started_at = utcnow()
    set_status(game, GameStatus.ACTIVE)
    current_app.logger.info(f"[activate] game={game.id} first_turn_order={seat.turn_order}")


def _resume(game):
    """paused -> active: keep the seat if it can still play, else move to the next unpassed one."""
    seats = snapshot(game.players)
    if all_passed(seats):
        raise ConflictError('Every player has passed; start a new round first', code='ROUND_OVER')
    domain = turn_order_domain()
    current = next((s for s in seats if s.turn_order == game.current_player_turn_order), None)
    if current is None or current.has_passed:
        seat = next_seat(seats, game.current_player_turn_order, domain)
        if seat is None:
            raise ConflictError('No player holds a valid turn order')
        game.current_player_turn_order = seat.turn_order
    set_status(game, GameStatus.ACTIVE)
    current_app.logger.info(f"[resume] game={game.id} turn_order={game.current_player_turn_order}")


def _non_negative_int(field, value, minimum=0):
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValidationError(f'{field} must be an integer >= {minimum}', details={field: value})
    return value


def update_game(game_id, changes):
    """Patch whitelisted game fields; status changes go through the transition table."""
    unknown = sorted(set(changes) - set(GAME_FIELDS))
    if unknown:
        raise ValidationError('Unsupported game fields', details={'fields': unknown})

    with game_transaction(game_id) as game:
        if 'status' in changes:
            target = parse_status(changes['status'])
            if game.status == GameStatus.SETUP.value and target == GameStatus.ACTIVE:
                _activate(game)
            elif game.status == GameStatus.PAUSED.value and target == GameStatus.ACTIVE:
                _resume(game)
            else:
                set_status(game, target)
        if 'current_turn' in changes:
            game.current_turn = _non_negative_int('current_turn', changes['current_turn'])
        if 'current_round' in changes:
            game.current_round = _non_negative_int('current_round', changes['current_round'], minimum=1)
        if 'current_player_turn_order' in changes:
            order = changes['current_player_turn_order']
            holder = next((p for p in game.players if p.turn_order == order), None)
            if holder is None:
                raise ValidationError('current_player_turn_order must match a player', details={'value': order})
            if game.status == GameStatus.ACTIVE.value and holder.has_passed:
                raise ValidationError('That player has already passed this round', details={'value': order})
            game.current_player_turn_order = order
        if 'speaker_player_id' in changes:
            speaker_id = changes['speaker_player_id']
            speaker = None
            if speaker_id is not None:
                speaker = next((p for p in game.players if p.id == speaker_id), None)
                if speaker is None:
                    raise NotFoundError('Player not found', details={'player_id': speaker_id})
            assign_speaker(game, speaker)
        db.session.add(game)

    current_app.logger.info(f"[update] game={game.id} fields={sorted(changes)}")
    emit_to_game(game.id, 'game_updated', {'game': game.to_dict()})
    return game


def rewind_turn(game_id):
    """Step the turn counter back by one.

    Only the counter moves: the active seat, pass flags, accrued time
    and history rows are left as they are.
    """
    with game_transaction(game_id) as game:
        if game.current_turn <= 0:
            raise ValidationError('Already at the first turn', code='REWIND_LIMIT')
        game.current_turn = game.current_turn - 1
        db.session.add(game)

    current_app.logger.info(f"[rewind] game={game.id} current_turn={game.current_turn}")
    emit_to_game(game.id, 'game_updated', {'game': game.to_dict()})
    return game


def reset_game(game_id):
    """Wipe scores, clocks, rounds and history; keep the roster."""
    with game_transaction(game_id) as game:
        for player in game.players:
            player.score = 0
            player.total_time_ms = 0
            player.strategy_card = None
            player.has_speaker = False
        history_deleted = TurnHistory.query.filter_by(game_id=game.id).delete(synchronize_session=False)
        round_ids = [r.id for r in game.rounds]
        if round_ids:
            StrategyCardPick.query.filter(StrategyCardPick.round_id.in_(round_ids)).delete(synchronize_session=False)
        rounds_deleted = Round.query.filter_by(game_id=game.id).delete(synchronize_session=False)
        game.current_turn = 0
        game.current_round = 1
        game.turn_started_at = utcnow()
        game.speaker_player_id = None
        db.session.add(game)

    current_app.logger.info(
        f"[reset] game={game.id} history_deleted={history_deleted} rounds_deleted={rounds_deleted}"
    )
    emit_to_game(game.id, 'game_reset', {'game': game.to_dict()})
    return game


def rounds_for_game(game_id):
    game = get_game_or_404(game_id)
    return game.rounds.order_by(Round.round_number.asc(), Round.id.asc()).all()


def history_for_game(game_id, limit=None):
    game = get_game_or_404(game_id)
    return game.recent_history(limit)
