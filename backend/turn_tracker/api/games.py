from flask import Blueprint, jsonify, request

from turn_tracker.api import json_body
from turn_tracker.errors import ValidationError
from turn_tracker.services import games as engine

games = Blueprint('games', __name__)


@games.route('', methods=['POST'])
def create_game():
    game = engine.create_game()
    return jsonify(game.to_dict()), 201


@games.route('', methods=['GET'])
def list_games():
    return jsonify([g.to_dict(include_history=False) for g in engine.list_games()])


@games.route('/<int:game_id>', methods=['GET'])
def get_game_state(game_id):
    """Full state viewers poll: game, players by turn order, latest history first."""
    game = engine.get_game_or_404(game_id)
    return jsonify(game.to_dict())


@games.route('/<int:game_id>', methods=['PATCH'])
def update_game(game_id):
    data = json_body()
    if not data:
        raise ValidationError('No fields to update')
    game = engine.update_game(game_id, data)
    return jsonify(game.to_dict())


@games.route('/<int:game_id>/rewind', methods=['POST'])
def rewind_turn(game_id):
    game = engine.rewind_turn(game_id)
    return jsonify(game.to_dict())


@games.route('/<int:game_id>/reset', methods=['POST'])
def reset_game(game_id):
    game = engine.reset_game(game_id)
    return jsonify(game.to_dict())


@games.route('/<int:game_id>/rounds', methods=['GET'])
def list_rounds(game_id):
    return jsonify([r.to_dict() for r in engine.rounds_for_game(game_id)])


@games.route('/<int:game_id>/history', methods=['GET'])
def list_history(game_id):
    limit = request.args.get('limit', type=int)
    if limit is not None and limit < 1:
        raise ValidationError('limit must be a positive integer')
    return jsonify([h.to_dict() for h in engine.history_for_game(game_id, limit)])
