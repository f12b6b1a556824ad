from flask import Blueprint, jsonify

from turn_tracker.api import int_field, json_body
from turn_tracker.services import games as engine

rounds = Blueprint('rounds', __name__)


@rounds.route('', methods=['POST'])
def start_round():
    data = json_body()
    game, round_ = engine.start_round(int_field(data, 'game_id'), data.get('strategy_assignments'))
    return jsonify({'game': game.to_dict(), 'round': round_.to_dict()}), 201


@rounds.route('/next', methods=['POST'])
def advance_round():
    data = json_body()
    game = engine.advance_round(int_field(data, 'game_id'))
    return jsonify({'game': game.to_dict()})
