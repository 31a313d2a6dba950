"""create room table

Revision ID: 5b7e2d9c1a04
Revises:
Create Date: 2026-10-18 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7e2d9c1a04'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    # Fresh installs may already have the table from `flask rooms-reset`
    if 'room' in set(insp.get_table_names()):
        return
    op.create_table(
        'room',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('state', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    op.drop_table('room')
