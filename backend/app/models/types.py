"""Custom column types."""

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import DateTime, Text, TypeDecorator

logger = logging.getLogger(__name__)


def decode_id_list(raw: str | None) -> list[str]:
    """Decode a JSON-encoded list of ids.

    An empty allow-list means "include everything", so anything that cannot be
    read as a list (missing value, bad JSON, a non-list document) decodes to
    ``[]`` and therefore widens the scope rather than hiding content.
    """
    if raw is None or raw == "":
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Unreadable id list {raw!r}; treating as empty (include all)")
        return []
    if not isinstance(value, list):
        logger.warning(f"Id list is not a JSON array: {raw!r}; treating as empty (include all)")
        return []
    return [str(item) for item in value]


class JSONStringList(TypeDecorator):
    """List of strings stored as a JSON array in a TEXT column."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return json.dumps([str(item) for item in (value or [])])

    def process_result_value(self, value, dialect):
        return decode_id_list(value)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Aware UTC form of ``value``; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Aware UTC datetime, stored as naive UTC so SQLite ordering stays textual."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        return as_utc(value)
