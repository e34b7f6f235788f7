"""Add removed_at to text_blocks.

Revision ID: 003
Revises: 002
Create Date: 2025-02-03
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '003'
down_revision = '002'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Set when a sync no longer finds the block upstream
    op.add_column('text_blocks', sa.Column('removed_at', sa.DateTime(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table('text_blocks') as batch_op:
        batch_op.drop_column('removed_at')
