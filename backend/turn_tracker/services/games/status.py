from enum import Enum

from turn_tracker.errors import TransitionError, ValidationError


class GameStatus(str, Enum):
    SETUP = 'setup'
    ACTIVE = 'active'
    PAUSED = 'paused'


# setup -> active <-> paused; no terminal state
TRANSITIONS = {
    GameStatus.SETUP: {GameStatus.ACTIVE},
    GameStatus.ACTIVE: {GameStatus.PAUSED},
    GameStatus.PAUSED: {GameStatus.ACTIVE},
}


def parse_status(value) -> GameStatus:
    try:
        return GameStatus(value)
    except ValueError:
        allowed = ', '.join(s.value for s in GameStatus)
        raise ValidationError(f'status must be one of: {allowed}', details={'status': value})


def can_transition(current: GameStatus, new: GameStatus) -> bool:
    return current == new or new in TRANSITIONS[current]


def set_status(game, new) -> bool:
    """Move ``game`` to ``new`` status. Only writer of ``Game.status``.

    Returns True when the status changed, False for a same-status no-op.
    Raises TransitionError for moves outside the transition table.
    """
    new = parse_status(new)
    current = GameStatus(game.status)
    if not can_transition(current, new):
        raise TransitionError(current.value, new.value)
    if current == new:
        return False
    game.status = new.value
    return True
