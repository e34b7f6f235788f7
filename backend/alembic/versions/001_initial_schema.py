"""Initial schema: projects, frames, text blocks and app settings.

Revision ID: 001
Revises:
Create Date: 2025-01-14
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # The single-file schema had its own text_blocks table keyed by node id
    # alone. Its rows cannot be attributed to a project, so it is set aside
    # and the first sync repopulates blocks.
    if sa.inspect(op.get_bind()).has_table('text_blocks'):
        op.rename_table('text_blocks', 'legacy_text_blocks')

    op.create_table(
        'projects',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('figma_file_key', sa.String(), nullable=False),
        sa.Column('figma_token', sa.String(), nullable=False),
        sa.Column('included_components', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('source_page_ids', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('last_sync', sa.DateTime(), nullable=True),
        sa.Column('last_export', sa.DateTime(), nullable=True),
        sa.Column('archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_projects_name', 'projects', ['name'])
    op.create_index('ix_projects_archived', 'projects', ['archived'])

    op.create_table(
        'frames',
        sa.Column('project_id', sa.String(), nullable=False),
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('x', sa.Float(), nullable=False),
        sa.Column('y', sa.Float(), nullable=False),
        sa.Column('width', sa.Float(), nullable=False),
        sa.Column('height', sa.Float(), nullable=False),
        sa.Column('last_synced', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('project_id', 'id'),
    )

    op.create_table(
        'text_blocks',
        sa.Column('project_id', sa.String(), nullable=False),
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('page_id', sa.String(), nullable=False),
        sa.Column('page_name', sa.String(), nullable=False),
        sa.Column('frame_id', sa.String(), nullable=True),
        sa.Column('frame_name', sa.String(), nullable=True),
        sa.Column('frame_x', sa.Float(), nullable=True),
        sa.Column('frame_y', sa.Float(), nullable=True),
        sa.Column('frame_width', sa.Float(), nullable=True),
        sa.Column('frame_height', sa.Float(), nullable=True),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('style', sa.String(), nullable=False),
        sa.Column('font_size', sa.Float(), nullable=True),
        sa.Column('x', sa.Float(), nullable=False),
        sa.Column('y', sa.Float(), nullable=False),
        sa.Column('width', sa.Float(), nullable=False),
        sa.Column('height', sa.Float(), nullable=False),
        sa.Column('content_hash', sa.String(), nullable=False),
        sa.Column('last_modified', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('change_status', sa.String(16), nullable=False, server_default='clean'),
        sa.Column('previous_content', sa.String(), nullable=True),
        sa.Column('previous_style', sa.String(), nullable=True),
        sa.Column('previous_x', sa.Float(), nullable=True),
        sa.Column('previous_y', sa.Float(), nullable=True),
        sa.Column('previous_width', sa.Float(), nullable=True),
        sa.Column('previous_height', sa.Float(), nullable=True),
        sa.Column('previous_content_hash', sa.String(), nullable=True),
        sa.Column('change_detected_at', sa.DateTime(), nullable=True),
        sa.Column('change_accepted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('project_id', 'id'),
    )
    op.create_index('ix_text_blocks_frame_id', 'text_blocks', ['frame_id'])
    op.create_index('ix_text_blocks_content_hash', 'text_blocks', ['content_hash'])
    op.create_index('ix_text_blocks_last_modified', 'text_blocks', ['last_modified'])
    op.create_index('ix_text_blocks_change_status', 'text_blocks', ['change_status'])

    op.create_table(
        'app_settings',
        sa.Column('key', sa.String(), nullable=False),
        sa.Column('value', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    op.drop_table('app_settings')
    op.drop_index('ix_text_blocks_change_status', table_name='text_blocks')
    op.drop_index('ix_text_blocks_last_modified', table_name='text_blocks')
    op.drop_index('ix_text_blocks_content_hash', table_name='text_blocks')
    op.drop_index('ix_text_blocks_frame_id', table_name='text_blocks')
    op.drop_table('text_blocks')
    op.drop_table('frames')
    op.drop_index('ix_projects_archived', table_name='projects')
    op.drop_index('ix_projects_name', table_name='projects')
    op.drop_table('projects')
