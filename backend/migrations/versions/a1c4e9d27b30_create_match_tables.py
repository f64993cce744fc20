"""create matches, rounds, score_events and penalty_events

Revision ID: a1c4e9d27b30
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c4e9d27b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'matches' not in existing_tables:
        op.create_table(
            'matches',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('weight_category', sa.String(length=64), nullable=False),
            sa.Column('red_competitor_name', sa.String(length=128), nullable=False),
            sa.Column('red_competitor_country', sa.String(length=64), nullable=False),
            sa.Column('blue_competitor_name', sa.String(length=128), nullable=False),
            sa.Column('blue_competitor_country', sa.String(length=64), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='upcoming'),
            sa.Column('current_round', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('total_rounds', sa.Integer(), nullable=False, server_default='3'),
            sa.Column('round_duration_minutes', sa.Integer(), nullable=False, server_default='2'),
            sa.Column('red_total_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('blue_total_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('winner_color', sa.String(length=8), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )

    if 'rounds' not in existing_tables:
        op.create_table(
            'rounds',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('match_id', sa.Integer(), nullable=False),
            sa.Column('round_number', sa.Integer(), nullable=False),
            sa.Column('red_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('blue_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('red_penalties', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('blue_penalties', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('winner_color', sa.String(length=8), nullable=True),
            sa.Column('started_at', sa.DateTime(), nullable=True),
            sa.Column('ended_at', sa.DateTime(), nullable=True),
            sa.Column('duration_seconds', sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(['match_id'], ['matches.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('match_id', 'round_number', name='uq_rounds_match_round_number'),
        )
        op.create_index('ix_rounds_match_id', 'rounds', ['match_id'])

    for table, kind_column in (('score_events', 'score_type'), ('penalty_events', 'penalty_type')):
        if table in existing_tables:
            continue
        columns = [
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('match_id', sa.Integer(), nullable=False),
            sa.Column('round_id', sa.Integer(), nullable=False),
            sa.Column('competitor_color', sa.String(length=8), nullable=False),
            sa.Column(kind_column, sa.String(length=32), nullable=False),
        ]
        if table == 'score_events':
            columns.append(sa.Column('points', sa.Integer(), nullable=False))
        columns += [
            sa.Column('timestamp', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['match_id'], ['matches.id']),
            sa.ForeignKeyConstraint(['round_id'], ['rounds.id']),
            sa.PrimaryKeyConstraint('id'),
        ]
        op.create_table(table, *columns)
        op.create_index(f'ix_{table}_match_id', table, ['match_id'])
        op.create_index(f'ix_{table}_round_id', table, ['round_id'])


def downgrade():
    op.drop_index('ix_penalty_events_round_id', table_name='penalty_events')
    op.drop_index('ix_penalty_events_match_id', table_name='penalty_events')
    op.drop_table('penalty_events')
    op.drop_index('ix_score_events_round_id', table_name='score_events')
    op.drop_index('ix_score_events_match_id', table_name='score_events')
    op.drop_table('score_events')
    op.drop_index('ix_rounds_match_id', table_name='rounds')
    op.drop_table('rounds')
    op.drop_table('matches')
