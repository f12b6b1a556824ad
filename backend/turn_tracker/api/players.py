from flask import Blueprint, jsonify

from turn_tracker.api import int_field, json_body
from turn_tracker.errors import ValidationError
from turn_tracker.services import games as engine

players = Blueprint('players', __name__)


@players.route('', methods=['POST'])
def create_player():
    data = json_body()
    player = engine.create_player(
        int_field(data, 'game_id'),
        name=data.get('name'),
        color=data.get('color'),
        faction=data.get('faction'),
        turn_order=int_field(data, 'turn_order', required=False),
    )
    return jsonify(player.to_dict()), 201


@players.route('/<int:player_id>', methods=['PATCH'])
def update_player(player_id):
    data = json_body()
    if not data:
        raise ValidationError('No fields to update')
    player = engine.update_player(player_id, data)
    return jsonify(player.to_dict())
