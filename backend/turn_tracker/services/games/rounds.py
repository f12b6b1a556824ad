from flask import current_app

from turn_tracker import db
from turn_tracker.broadcast import emit_to_game
from turn_tracker.errors import ConflictError, NotFoundError, ValidationError
from turn_tracker.models import Round, StrategyCardPick, utcnow
from .status import GameStatus, set_status
from .transaction import game_transaction
from .turn_order import turn_order_domain


def validate_assignments(assignments, domain):
    """Normalise ``[{player_id, card_number}]`` and reject bad card sets before any write."""
    if not isinstance(assignments, list) or not assignments:
        raise ValidationError('strategy_assignments must be a non-empty list')
    normalised = []
    seen_players, seen_cards = set(), set()
    for idx, item in enumerate(assignments):
        if not isinstance(item, dict):
            raise ValidationError('Each assignment needs player_id and card_number', details={'index': idx})
        try:
            player_id = int(item.get('player_id'))
            card = int(item.get('card_number'))
        except (TypeError, ValueError):
            raise ValidationError('Each assignment needs player_id and card_number', details={'index': idx})
        if card not in domain:
            raise ValidationError(
                f'card_number must be between {min(domain)} and {max(domain)}',
                details={'index': idx, 'card_number': card},
            )
        if card in seen_cards:
            raise ValidationError('Strategy card assigned twice', code='DUPLICATE_CARD', details={'card_number': card})
        if player_id in seen_players:
            raise ValidationError('Player assigned twice', code='DUPLICATE_PLAYER', details={'player_id': player_id})
        seen_cards.add(card)
        seen_players.add(player_id)
        normalised.append((player_id, card))
    return normalised


def start_round(game_id, assignments):
    """Open a round with the given strategy-card picks.

    Each pick seats its player at ``turn_order == card_number``; the
    lowest card starts. Every player in the game must be assigned, and
    all writes land in one transaction.

    The game must already be activated: rounds start from ``active`` or
    ``paused``, never from ``setup``.
    """
    domain = turn_order_domain()
    picks = validate_assignments(assignments, domain)

    with game_transaction(game_id) as game:
        if game.status == GameStatus.SETUP.value:
            raise ConflictError('Activate the game before starting a round', code='GAME_NOT_STARTED')
        players = {p.id: p for p in game.players}
        missing = [pid for pid, _ in picks if pid not in players]
        if missing:
            raise NotFoundError('Player not found', details={'player_ids': missing})
        unassigned = sorted(set(players) - {pid for pid, _ in picks})
        if unassigned:
            raise ValidationError('Every player needs a strategy card', details={'player_ids': unassigned})

        now = utcnow()
        round_ = Round(game_id=game.id, round_number=game.current_round, created_at=now)
        db.session.add(round_)
        for pick_order, (player_id, card) in enumerate(picks):
            round_.strategy_picks.append(
                StrategyCardPick(player_id=player_id, card_number=card, pick_order=pick_order)
            )
            player = players[player_id]
            player.strategy_card = card
            player.turn_order = card
            player.has_passed = False

        game.current_turn = 0
        game.current_player_turn_order = min(card for _, card in picks)
        game.turn_started_at = now
        set_status(game, GameStatus.ACTIVE)
        db.session.add(game)

    seating = ','.join(f"{pid}:{card}" for pid, card in picks)
    current_app.logger.info(f"[round_start] game={game.id} round={round_.round_number} picks={seating}")
    emit_to_game(game.id, 'round_started', {'game': game.to_dict(), 'round': round_.to_dict()})
    return game, round_


def advance_round(game_id):
    """Close the current round by hand and pause for the next strategy phase."""
    with game_transaction(game_id) as game:
        now = utcnow()
        open_rounds = game.rounds.filter_by(round_number=game.current_round).all()
        for round_ in open_rounds:
            if round_.ended_at is None:
                round_.ended_at = now

        ended = game.current_round
        game.current_round = ended + 1
        set_status(game, GameStatus.PAUSED)
        for player in game.players:
            player.strategy_card = None
            player.has_passed = False
        db.session.add(game)

    current_app.logger.info(
        f"[round_end] game={game.id} ended={ended} rows_stamped={len(open_rounds)} next={game.current_round}"
    )
    emit_to_game(game.id, 'round_ended', {'game': game.to_dict()})
    return game
