"""add arrival sequence to score_record

Revision ID: 5b8d2f6e0a31
Revises: 1c4e7a9b2d10
Create Date: 2026-10-19 12:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b8d2f6e0a31'
down_revision = '1c4e7a9b2d10'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    cols = {c['name'] for c in insp.get_columns('score_record')}
    if 'arrival' not in cols:
        with op.batch_alter_table('score_record') as batch_op:
            batch_op.add_column(sa.Column('arrival', sa.BigInteger(), nullable=False, server_default='0'))
        # Existing rows keep their insertion order
        op.execute("UPDATE score_record SET arrival = id")


def downgrade():
    with op.batch_alter_table('score_record') as batch_op:
        batch_op.drop_column('arrival')
