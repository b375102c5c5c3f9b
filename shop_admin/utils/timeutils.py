from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from shop_admin.utils.exceptions import ValidationError


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp, the form every table column is written with."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    # SQLite hands stored values back without an offset; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Optional[str], *, field: str = "date") -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime string from a query parameter.

    ``2024-01-15`` means midnight UTC of that day. A trailing ``Z`` is accepted.
    """
    if value is None or value == "":
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}")
    return to_utc(parsed)
