from flask import current_app

from turn_tracker import db
from turn_tracker.broadcast import emit_to_game
from turn_tracker.errors import ConflictError, NotFoundError, ValidationError
from turn_tracker.models import Player
from turn_tracker.reference import PLAYER_COLORS
from .status import GameStatus
from .transaction import game_transaction
from .turn_order import lowest_free_order, turn_order_domain

PLAYER_FIELDS = ('name', 'color', 'faction', 'score', 'has_speaker')


def _validate_color(color):
    if color not in PLAYER_COLORS:
        raise ValidationError(f"color must be one of: {', '.join(PLAYER_COLORS)}", details={'color': color})


def _validate_name(name):
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('name must be a non-empty string')
    if len(name.strip()) > 64:
        raise ValidationError('name must be at most 64 characters')
    return name.strip()


def assign_speaker(game, player):
    """Give the speaker role to ``player`` (or nobody when None).

    Only writer of ``Player.has_speaker`` and ``Game.speaker_player_id``;
    keeps at most one speaker per game.
    """
    for p in game.players:
        p.has_speaker = player is not None and p.id == player.id
    game.speaker_player_id = player.id if player is not None else None
    current_app.logger.info(f"[speaker] game={game.id} player={game.speaker_player_id}")


def create_player(game_id, name=None, color=None, faction=None, turn_order=None):
    domain = turn_order_domain()
    with game_transaction(game_id) as game:
        if game.status != GameStatus.SETUP.value:
            raise ConflictError('Players can only be added while the game is in setup')
        if len(game.players) >= len(domain):
            raise ConflictError(f'A game holds at most {len(domain)} players')

        taken = [p.turn_order for p in game.players]
        if turn_order is None:
            turn_order = lowest_free_order(taken, domain)
        elif turn_order not in domain:
            raise ValidationError(
                f'turn_order must be between {min(domain)} and {max(domain)}', details={'turn_order': turn_order}
            )
        elif turn_order in taken:
            raise ValidationError('turn_order already taken', details={'turn_order': turn_order})

        if name is None or (isinstance(name, str) and not name.strip()):
            name = f'Player {len(game.players) + 1}'
        name = _validate_name(name)
        if color is None:
            used = {p.color for p in game.players}
            color = next((c for c in PLAYER_COLORS if c not in used), PLAYER_COLORS[0])
        _validate_color(color)

        player = Player(
            game_id=game.id,
            name=name,
            color=color,
            faction=faction or None,
            turn_order=turn_order,
        )
        db.session.add(player)

    current_app.logger.info(f"[player_create] game={game_id} player={player.id} turn_order={player.turn_order}")
    emit_to_game(player.game_id, 'player_joined', player.to_dict())
    return player


def update_player(player_id, changes):
    """Apply an admin edit. Score is taken as given; speaker goes through assign_speaker."""
    unknown = sorted(set(changes) - set(PLAYER_FIELDS))
    if unknown:
        raise ValidationError('Unsupported player fields', details={'fields': unknown})

    player = db.session.get(Player, player_id) if player_id is not None else None
    if player is None:
        raise NotFoundError('Player not found', details={'player_id': player_id})

    with game_transaction(player.game_id) as game:
        if 'name' in changes:
            player.name = _validate_name(changes['name'])
        if 'color' in changes:
            _validate_color(changes['color'])
            player.color = changes['color']
        if 'faction' in changes:
            player.faction = changes['faction'] or None
        if 'score' in changes:
            score = changes['score']
            if isinstance(score, bool) or not isinstance(score, int):
                raise ValidationError('score must be an integer')
            player.score = score
        if 'has_speaker' in changes:
            if changes['has_speaker']:
                assign_speaker(game, player)
            elif player.has_speaker:
                assign_speaker(game, None)

    current_app.logger.info(f"[player_update] game={player.game_id} player={player.id} fields={sorted(changes)}")
    emit_to_game(player.game_id, 'player_updated', player.to_dict())
    return player
