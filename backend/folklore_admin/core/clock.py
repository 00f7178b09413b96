"""Venue-local date and time helpers."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from folklore_admin.core.config import settings


def local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone))


def local_today() -> date:
    """Business day in the venue's time zone."""
    return local_now().date()
