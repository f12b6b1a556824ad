import pytest
from sqlalchemy import text

from turn_tracker import db
from turn_tracker.errors import ConflictError, NotFoundError, TurnOrderError
from turn_tracker.models import Game, TurnHistory
from turn_tracker.services import games as engine


@pytest.fixture()
def seated_game(flask_app):
    game = engine.create_game()
    alice = engine.create_player(game.id, name='Alice')
    bob = engine.create_player(game.id, name='Bob')
    engine.update_game(game.id, {'status': 'active'})
    engine.start_round(game.id, [
        {'player_id': alice.id, 'card_number': 1},
        {'player_id': bob.id, 'card_number': 2},
    ])
    return game.id, alice.id, bob.id


def test_concurrent_writer_makes_flush_conflict(seated_game):
    game_id, _, _ = seated_game
    with pytest.raises(ConflictError):
        with engine.game_transaction(game_id) as game:
            # Another writer commits between our read and our write
            db.session.execute(text('UPDATE game SET version = version + 1 WHERE id = :id'), {'id': game_id})
            game.current_turn = 42
    db.session.expire_all()
    assert db.session.get(Game, game_id).current_turn == 0


def test_failed_turn_leaves_no_partial_writes(seated_game):
    game_id, alice_id, _ = seated_game
    with pytest.raises(NotFoundError):
        engine.record_turn(game_id, 999, 'end_turn', turn_duration_ms=10)
    assert TurnHistory.query.filter_by(game_id=game_id).count() == 0


def test_unreachable_next_seat_is_reported(seated_game):
    game_id, alice_id, bob_id = seated_game
    # Corrupt Bob's seat so the scan cannot find him
    db.session.execute(text('UPDATE player SET turn_order = 0 WHERE id = :id'), {'id': bob_id})
    db.session.commit()
    with pytest.raises(TurnOrderError):
        engine.record_turn(game_id, alice_id, 'pass', turn_duration_ms=10)
    assert TurnHistory.query.filter_by(game_id=game_id).count() == 0
    assert db.session.get(Game, game_id).current_turn == 0


def test_record_turn_returns_next_player(seated_game):
    game_id, alice_id, bob_id = seated_game
    game, entry, next_player = engine.record_turn(game_id, alice_id, 'end_turn', turn_duration_ms=250)
    assert next_player.id == bob_id
    assert entry.turn_duration_ms == 250
    assert game.current_player_turn_order == 2
    assert game.current_turn == 1
