# ABOUTME: Utility functions for time windows and message text formatting
# ABOUTME: Formats dates and times in the display zone for Slack mrkdwn

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional, Tuple

# English names regardless of process locale
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def get_time_window(days: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Calculate the lookahead window starting at now.

    A day is always 24 hours; the window does not follow calendar-day
    boundaries, so a daylight-saving change inside it shifts the apparent
    end by an hour.

    Args:
        days: Number of days ahead
        now: Start of the window (defaults to the current UTC instant)

    Returns:
        Tuple of (start, cutoff) datetimes
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return now, now + timedelta(days=days)


def format_time(dt: datetime) -> str:
    """Format as e.g. '7:05 PM'."""
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {meridiem}"


def format_short_date(dt: datetime) -> str:
    """Format as e.g. 'Feb 28'."""
    return f"{MONTH_NAMES[dt.month - 1]} {dt.day}"


def format_date_range(start: datetime, end: datetime, tz: tzinfo) -> str:
    """
    Format a session's start and end for display.

    The zone suffix is only shown once, after the end time.

    Example: 'Sat, Feb 28 · 11:00 AM–1:00 PM EST'
    """
    start = start.astimezone(tz)
    end = end.astimezone(tz)
    return (
        f"{WEEKDAY_NAMES[start.weekday()]}, {format_short_date(start)} · "
        f"{format_time(start)}–{format_time(end)} {end.tzname()}"
    )


def format_header_date_range(now: datetime, days: int, tz: tzinfo) -> str:
    """Format the lookahead window as e.g. 'Feb 28 – Mar 7'."""
    start, cutoff = get_time_window(days, now)
    return f"{format_short_date(start.astimezone(tz))} – {format_short_date(cutoff.astimezone(tz))}"


def escape_mrkdwn(text: str) -> str:
    """Escape the control characters Slack reserves in mrkdwn text."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
