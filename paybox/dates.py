"""
Timestamp helpers.

Timestamps are stored as naive UTC; naive input from forms is interpreted in
the organization's timezone.
"""
from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from paybox.config import settings


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage(value: datetime) -> datetime:
    """Convert a form or API timestamp to naive UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=local_tz())
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(local_tz())


def format_local_date(value: datetime) -> str:
    """dd/mm/yyyy in the organization's timezone."""
    return to_local(value).strftime("%d/%m/%Y")
