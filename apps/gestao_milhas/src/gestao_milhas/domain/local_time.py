"""Rendering of stored timestamps in the operators' timezone."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo


def to_local(value: datetime, timezone_name: str) -> datetime:
    """Convert a timestamp to the given timezone; naive values are UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(ZoneInfo(timezone_name))


def format_local(value: datetime, timezone_name: str) -> str:
    """Return the timestamp as DD/MM/YYYY HH:MM in the given timezone."""

    return to_local(value, timezone_name).strftime("%d/%m/%Y %H:%M")
