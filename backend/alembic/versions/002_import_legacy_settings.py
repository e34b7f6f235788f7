"""Create a default project from single-file settings.

Installs that predate projects kept one Figma file as key/value settings,
either in a `settings` table left by the old single-file schema or in
app_settings. When those keys are present and no project exists yet, they
become the first project. Rows from `settings` are copied into app_settings.

Revision ID: 002
Revises: 001
Create Date: 2025-01-14
"""
from datetime import datetime, timezone
from uuid import uuid4

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None

projects = sa.table(
    'projects',
    sa.column('id', sa.String),
    sa.column('name', sa.String),
    sa.column('figma_file_key', sa.String),
    sa.column('figma_token', sa.String),
    sa.column('included_components', sa.Text),
    sa.column('source_page_ids', sa.Text),
    sa.column('last_sync', sa.DateTime),
    sa.column('archived', sa.Boolean),
    sa.column('created_at', sa.DateTime),
    sa.column('updated_at', sa.DateTime),
)
app_settings = sa.table(
    'app_settings',
    sa.column('key', sa.String),
    sa.column('value', sa.String),
    sa.column('created_at', sa.DateTime),
    sa.column('updated_at', sa.DateTime),
)


def _stored(value: datetime) -> datetime:
    # timestamp columns hold naive UTC
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_last_sync(raw: str | None) -> datetime | None:
    # legacy value is epoch milliseconds
    if not raw:
        return None
    try:
        return _stored(datetime.fromtimestamp(int(raw) / 1000, tz=timezone.utc))
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def upgrade() -> None:
    bind = op.get_bind()

    if bind.execute(sa.text('SELECT COUNT(*) FROM projects')).scalar():
        return

    legacy = {
        key: value
        for key, value in bind.execute(sa.text('SELECT key, value FROM app_settings')).all()
    }
    if sa.inspect(bind).has_table('settings'):
        now = _stored(datetime.now(timezone.utc))
        for key, value in bind.execute(sa.text('SELECT key, value FROM settings')).all():
            if key not in legacy:
                op.execute(
                    app_settings.insert().values(key=key, value=value, created_at=now, updated_at=now)
                )
                legacy[key] = value

    if not legacy.get('figma_file_key') or not legacy.get('figma_token'):
        return

    now = _stored(datetime.now(timezone.utc))
    op.execute(
        projects.insert().values(
            id=str(uuid4()),
            name=legacy.get('project_name') or 'Default Project',
            figma_file_key=legacy['figma_file_key'],
            figma_token=legacy['figma_token'],
            included_components='[]',
            source_page_ids='[]',
            last_sync=_parse_last_sync(legacy.get('last_sync')),
            archived=False,
            created_at=now,
            updated_at=now,
        )
    )


def downgrade() -> None:
    # The imported project is indistinguishable from a user-created one
    pass
