from flask import current_app, request
from flask_socketio import join_room, leave_room, emit
from turn_tracker import socketio
from turn_tracker.broadcast import NAMESPACE, game_room


def _game_id(data):
    game_id = (data or {}).get('game_id') if isinstance(data, dict) else data
    try:
        return int(game_id)
    except (TypeError, ValueError):
        return None


def handle_connect():
    current_app.logger.debug(f"[ws] connect sid={request.sid}")
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_disconnect(*args):
    current_app.logger.debug(f"[ws] disconnect sid={request.sid}")


def handle_join_game(data):
    game_id = _game_id(data)
    if game_id is None:
        emit('error', {'message': 'game_id is required'})
        return
    room = game_room(game_id)
    join_room(room)
    current_app.logger.debug(f"[ws] sid={request.sid} joined {room}")
    emit('joined', {'room': room, 'game_id': game_id})


def handle_leave_game(data):
    game_id = _game_id(data)
    if game_id is None:
        emit('error', {'message': 'game_id is required'})
        return
    room = game_room(game_id)
    leave_room(room)
    emit('left', {'room': room, 'game_id': game_id})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('disconnect', handle_disconnect, namespace=ns)
        socketio.on_event('join_game', handle_join_game, namespace=ns)
        socketio.on_event('leave_game', handle_leave_game, namespace=ns)
        socketio.on_event('ping', handle_ping, namespace=ns)
