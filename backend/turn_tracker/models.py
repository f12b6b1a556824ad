from datetime import datetime, timezone
from flask import current_app
from turn_tracker import db
from turn_tracker.reference import strategy_card_name


def utcnow():
    """Naive UTC timestamp; every DateTime column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() + 'Z' if value else None


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    name = db.Column(db.String(64), nullable=False)
    color = db.Column(db.String(16), nullable=False)
    faction = db.Column(db.String(64), nullable=True)
    turn_order = db.Column(db.Integer, nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)
    total_time_ms = db.Column(db.BigInteger, default=0, nullable=False)
    strategy_card = db.Column(db.Integer, nullable=True)
    has_passed = db.Column(db.Boolean, default=False, nullable=False)
    has_speaker = db.Column(db.Boolean, default=False, nullable=False)
    game = db.relationship('Game', back_populates='players')

    def to_dict(self):
        return {
            'id': self.id,
            'game_id': self.game_id,
            'name': self.name,
            'color': self.color,
            'faction': self.faction,
            'turn_order': self.turn_order,
            'score': self.score,
            'total_time_ms': self.total_time_ms,
            'strategy_card': self.strategy_card,
            'strategy_card_name': strategy_card_name(self.strategy_card),
            'has_passed': self.has_passed,
            'has_speaker': self.has_speaker,
        }


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    status = db.Column(db.String(16), default='setup', nullable=False)  # setup, active, paused
    current_round = db.Column(db.Integer, default=1, nullable=False)
    current_turn = db.Column(db.Integer, default=0, nullable=False)
    current_player_turn_order = db.Column(db.Integer, default=1, nullable=False)
    turn_started_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    speaker_player_id = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    # Optimistic version counter; bumped by every UPDATE of the row
    version = db.Column(db.Integer, nullable=False)
    players = db.relationship('Player', back_populates='game', order_by='Player.turn_order')
    rounds = db.relationship('Round', back_populates='game', lazy='dynamic')
    history = db.relationship('TurnHistory', back_populates='game', lazy='dynamic')

    __mapper_args__ = {'version_id_col': version}

    @property
    def current_player(self):
        for p in self.players:
            if p.turn_order == self.current_player_turn_order:
                return p
        return None

    def recent_history(self, limit=None):
        if limit is None:
            limit = current_app.config.get('HISTORY_LIMIT', 50)
        return (
            self.history.order_by(TurnHistory.created_at.desc(), TurnHistory.id.desc())
            .limit(limit)
            .all()
        )

    def to_dict(self, include_history=True):
        current = self.current_player if self.status == 'active' else None
        data = {
            'id': self.id,
            'status': self.status,
            'current_round': self.current_round,
            'current_turn': self.current_turn,
            'current_player_turn_order': self.current_player_turn_order,
            'current_player_id': current.id if current else None,
            'turn_started_at': isoformat(self.turn_started_at),
            'speaker_player_id': self.speaker_player_id,
            'created_at': isoformat(self.created_at),
            'version': self.version,
            'players': [p.to_dict() for p in self.players],
        }
        if include_history:
            data['history'] = [h.to_dict() for h in self.recent_history()]
        return data


class Round(db.Model):
    __tablename__ = 'round'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    round_number = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    ended_at = db.Column(db.DateTime, nullable=True)
    game = db.relationship('Game', back_populates='rounds')
    strategy_picks = db.relationship(
        'StrategyCardPick', back_populates='round', order_by='StrategyCardPick.pick_order',
        cascade='all, delete-orphan',
    )

    def to_dict(self):
        return {
            'id': self.id,
            'game_id': self.game_id,
            'round_number': self.round_number,
            'created_at': isoformat(self.created_at),
            'ended_at': isoformat(self.ended_at),
            'strategy_picks': [pick.to_dict() for pick in self.strategy_picks],
        }


class StrategyCardPick(db.Model):
    __tablename__ = 'strategy_card_pick'
    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey('round.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    card_number = db.Column(db.Integer, nullable=False)
    pick_order = db.Column(db.Integer, nullable=False)
    round = db.relationship('Round', back_populates='strategy_picks')

    __table_args__ = (
        db.UniqueConstraint('round_id', 'card_number', name='uq_pick_round_card'),
        db.UniqueConstraint('round_id', 'player_id', name='uq_pick_round_player'),
    )

    def to_dict(self):
        return {
            'round_id': self.round_id,
            'player_id': self.player_id,
            'card_number': self.card_number,
            'card_name': strategy_card_name(self.card_number),
            'pick_order': self.pick_order,
        }


class TurnHistory(db.Model):
    """Append-only log of finished turns.

    Player name and colour are copied at write time so later renames do
    not rewrite history. Rows are never updated, only bulk-deleted by a
    full game reset.
    """
    __tablename__ = 'turn_history'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    player_name = db.Column(db.String(64), nullable=False)
    player_color = db.Column(db.String(16), nullable=False)
    round_number = db.Column(db.Integer, nullable=False)
    turn_number = db.Column(db.Integer, nullable=False)
    turn_started_at = db.Column(db.DateTime, nullable=False)
    turn_ended_at = db.Column(db.DateTime, nullable=False)
    turn_duration_ms = db.Column(db.BigInteger, nullable=False)
    action = db.Column(db.String(16), nullable=False)  # end_turn, pass
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    game = db.relationship('Game', back_populates='history')

    def to_dict(self):
        return {
            'id': self.id,
            'game_id': self.game_id,
            'player_id': self.player_id,
            'player_name': self.player_name,
            'player_color': self.player_color,
            'round_number': self.round_number,
            'turn_number': self.turn_number,
            'turn_started_at': isoformat(self.turn_started_at),
            'turn_ended_at': isoformat(self.turn_ended_at),
            'turn_duration_ms': self.turn_duration_ms,
            'action': self.action,
            'created_at': isoformat(self.created_at),
        }
