from contextlib import contextmanager

from sqlalchemy.orm.exc import StaleDataError

from turn_tracker import db
from turn_tracker.errors import ConflictError, NotFoundError
from turn_tracker.models import Game


def get_game_or_404(game_id) -> Game:
    game = db.session.get(Game, game_id) if game_id is not None else None
    if game is None:
        raise NotFoundError('Game not found', details={'game_id': game_id})
    return game


@contextmanager
def game_transaction(game_id, expected_version=None):
    """Serialise one mutation of a game.

    Loads the game row locked for update, yields it, and commits every
    write made inside the block as one unit. Any error rolls the whole
    block back. A concurrent writer that committed first bumps the
    version counter, which makes this flush fail with ConflictError.
    """
    game = db.session.get(Game, game_id, with_for_update=True) if game_id is not None else None
    if game is None:
        raise NotFoundError('Game not found', details={'game_id': game_id})
    if expected_version is not None and int(expected_version) != game.version:
        db.session.rollback()
        raise ConflictError(
            'Game state changed since it was read',
            details={'expected_version': expected_version, 'version': game.version},
        )
    try:
        yield game
        db.session.commit()
    except StaleDataError as exc:
        db.session.rollback()
        raise ConflictError('Game was modified concurrently', details={'game_id': game_id}) from exc
    except Exception:
        db.session.rollback()
        raise
