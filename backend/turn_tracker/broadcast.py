from typing import Any, Dict
from flask import current_app
from turn_tracker import socketio

NAMESPACE = '/ws'


def game_room(game_id: int) -> str:
    return f"game:{game_id}"


def emit_to_game(game_id: int, event: str, payload: Dict[str, Any]) -> None:
    """Fan an event out to every viewer subscribed to the game.

    Delivery is best-effort. Viewers re-poll the full state, so a failed
    emit is logged and dropped.
    """
    try:
        socketio.emit(event, payload, to=game_room(game_id), namespace=NAMESPACE)
    except Exception as exc:
        current_app.logger.warning(f"[broadcast] game={game_id} event={event} dropped: {exc}")
