import os
import sys
import pytest

# Ensure the backend root (containing the `turn_tracker` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from turn_tracker import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STRATEGY_CARD_COUNT = 8
    MIN_PLAYERS = 2
    HISTORY_LIMIT = 50
    GAME_LIST_LIMIT = 20
    CORS_ORIGINS = ['http://localhost:3000']
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import turn_tracker.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app, client):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=client,
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def new_game(client):
    """Create a game in setup with the given player names; returns the state payload."""
    def _new_game(names=('Alice', 'Bob', 'Cara')):
        game = client.post('/api/games').get_json()
        for name in names:
            res = client.post('/api/players', json={'game_id': game['id'], 'name': name})
            assert res.status_code == 201, res.get_json()
        return client.get(f"/api/games/{game['id']}").get_json()
    return _new_game


@pytest.fixture()
def active_game(client, new_game):
    """A game past setup with cards assigned; ``cards`` maps player name -> card number."""
    def _active_game(cards):
        state = new_game(tuple(cards))
        res = client.patch(f"/api/games/{state['id']}", json={'status': 'active'})
        assert res.status_code == 200, res.get_json()
        ids = {p['name']: p['id'] for p in state['players']}
        assignments = [{'player_id': ids[name], 'card_number': card} for name, card in cards.items()]
        res = client.post('/api/rounds', json={'game_id': state['id'], 'strategy_assignments': assignments})
        assert res.status_code == 201, res.get_json()
        return res.get_json()['game']
    return _active_game


@pytest.fixture()
def end_turn(client):
    """Record a turn for whoever is active; returns the response."""
    def _end_turn(game_id, action='end_turn', duration=1000, player_id=None):
        if player_id is None:
            player_id = client.get(f'/api/games/{game_id}').get_json()['current_player_id']
        body = {'game_id': game_id, 'player_id': player_id, 'action': action}
        if duration is not None:
            body['turn_duration_ms'] = duration
        return client.post('/api/turns', json=body)
    return _end_turn
