from flask import Blueprint, jsonify

from turn_tracker.api import int_field, json_body
from turn_tracker.services import games as engine

turns = Blueprint('turns', __name__)


@turns.route('', methods=['POST'])
def record_turn():
    data = json_body()
    game, entry, next_player = engine.record_turn(
        int_field(data, 'game_id'),
        int_field(data, 'player_id'),
        data.get('action'),
        turn_duration_ms=int_field(data, 'turn_duration_ms', required=False),
        expected_version=int_field(data, 'expected_version', required=False),
    )
    return jsonify({
        'game': game.to_dict(),
        'turn_history': entry.to_dict(),
        'next_player_id': next_player.id if next_player else None,
    })
