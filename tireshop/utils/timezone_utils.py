"""
Timezone helpers for the shop.
Timestamps are stored in UTC; documents and daily reports use the shop's
display timezone (DISPLAY_TIMEZONE, default America/Vancouver).
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union

import pytz
from flask import current_app, has_app_context

DEFAULT_DISPLAY_TIMEZONE = "America/Vancouver"

def get_display_timezone() -> str:
    """Display timezone from the app config, or the shop default outside a request."""
    if has_app_context():
        return current_app.config.get("DISPLAY_TIMEZONE", DEFAULT_DISPLAY_TIMEZONE)
    return DEFAULT_DISPLAY_TIMEZONE

def utc_now() -> datetime:
    """
    Get current time in UTC.

    Returns:
        Current datetime in UTC
    """
    return datetime.now(timezone.utc)

def convert_utc_to_display(utc_dt: Union[datetime, str]) -> datetime:
    """
    Convert a UTC datetime to the configured display timezone.

    Args:
        utc_dt: UTC datetime object or ISO string. Naive values (as read back
            from SQLite) are taken to be UTC.

    Returns:
        Datetime object in the display timezone
    """
    if isinstance(utc_dt, str):
        utc_dt = datetime.fromisoformat(utc_dt.replace('Z', '+00:00'))
    if utc_dt.tzinfo is None:
        utc_dt = utc_dt.replace(tzinfo=timezone.utc)

    display_tz = pytz.timezone(get_display_timezone())
    return utc_dt.astimezone(display_tz)

def display_date(utc_dt: Optional[datetime]) -> Optional[date]:
    if utc_dt is None:
        return None
    return convert_utc_to_display(utc_dt).date()


def display_day_bounds_utc(day: date) -> Tuple[datetime, datetime]:
    """
    UTC [start, end) of a calendar day in the display timezone.

    Used for daily reports: a cash sale at 23:30 local time belongs to that
    local day even though it is already the next day in UTC.
    """
    display_tz = pytz.timezone(get_display_timezone())
    start = display_tz.localize(datetime.combine(day, time.min))
    end = display_tz.localize(datetime.combine(day + timedelta(days=1), time.min))
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
