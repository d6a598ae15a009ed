"""create score_record table

Revision ID: 1c4e7a9b2d10
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c4e7a9b2d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'score_record' in set(insp.get_table_names()):
        return
    op.create_table(
        'score_record',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_name', sa.String(length=64), nullable=False),
        sa.Column('player_name', sa.String(length=20), nullable=False),
        sa.Column('score', sa.BigInteger(), nullable=False),
        sa.Column('submitted_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('game_name', 'player_name', name='uq_score_record_game_player'),
    )
    op.create_index('ix_score_record_game_score', 'score_record', ['game_name', 'score'])


def downgrade():
    op.drop_index('ix_score_record_game_score', table_name='score_record')
    op.drop_table('score_record')
