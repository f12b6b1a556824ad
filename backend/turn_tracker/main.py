from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from turn_tracker import db
from turn_tracker.reference import FACTIONS, PLAYER_COLORS, strategy_cards

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the turn tracker server!'})


@main.route('/health')
def health():
    db.session.execute(text('SELECT 1'))
    return jsonify({'status': 'ok'})


@main.route('/api/reference')
def reference():
    return jsonify({
        'strategy_cards': strategy_cards(int(current_app.config.get('STRATEGY_CARD_COUNT', 8))),
        'colors': PLAYER_COLORS,
        'factions': FACTIONS,
    })
