"""initial turn tracker schema: game, player, round, strategy_card_pick, turn_history

Revision ID: 1a7c9e2f4b10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a7c9e2f4b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game' not in existing_tables:
        op.create_table(
            'game',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='setup'),
            sa.Column('current_round', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('current_turn', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('current_player_turn_order', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('turn_started_at', sa.DateTime(), nullable=False),
            sa.Column('speaker_player_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        )

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id'), nullable=False),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('color', sa.String(length=16), nullable=False),
            sa.Column('faction', sa.String(length=64), nullable=True),
            sa.Column('turn_order', sa.Integer(), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('total_time_ms', sa.BigInteger(), nullable=False, server_default='0'),
            sa.Column('strategy_card', sa.Integer(), nullable=True),
            sa.Column('has_passed', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('has_speaker', sa.Boolean(), nullable=False, server_default=sa.false()),
        )
        op.create_index('ix_player_game_id', 'player', ['game_id'])

    if 'round' not in existing_tables:
        op.create_table(
            'round',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id'), nullable=False),
            sa.Column('round_number', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('ended_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_round_game_id', 'round', ['game_id'])

    if 'strategy_card_pick' not in existing_tables:
        op.create_table(
            'strategy_card_pick',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('round_id', sa.Integer(), sa.ForeignKey('round.id'), nullable=False),
            sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
            sa.Column('card_number', sa.Integer(), nullable=False),
            sa.Column('pick_order', sa.Integer(), nullable=False),
            sa.UniqueConstraint('round_id', 'card_number', name='uq_pick_round_card'),
            sa.UniqueConstraint('round_id', 'player_id', name='uq_pick_round_player'),
        )
        op.create_index('ix_strategy_card_pick_round_id', 'strategy_card_pick', ['round_id'])

    if 'turn_history' not in existing_tables:
        op.create_table(
            'turn_history',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id'), nullable=False),
            sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
            sa.Column('player_name', sa.String(length=64), nullable=False),
            sa.Column('player_color', sa.String(length=16), nullable=False),
            sa.Column('round_number', sa.Integer(), nullable=False),
            sa.Column('turn_number', sa.Integer(), nullable=False),
            sa.Column('turn_started_at', sa.DateTime(), nullable=False),
            sa.Column('turn_ended_at', sa.DateTime(), nullable=False),
            sa.Column('turn_duration_ms', sa.BigInteger(), nullable=False),
            sa.Column('action', sa.String(length=16), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_turn_history_game_id', 'turn_history', ['game_id'])


def downgrade():
    op.drop_index('ix_turn_history_game_id', table_name='turn_history')
    op.drop_table('turn_history')
    op.drop_index('ix_strategy_card_pick_round_id', table_name='strategy_card_pick')
    op.drop_table('strategy_card_pick')
    op.drop_index('ix_round_game_id', table_name='round')
    op.drop_table('round')
    op.drop_index('ix_player_game_id', table_name='player')
    op.drop_table('player')
    op.drop_table('game')
