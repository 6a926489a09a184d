"""
Shared pure-utility functions for tdcli.

These helpers have no business logic and no side effects.
They are used across client.py, commands.py and the formatters package.
"""

from datetime import datetime, timezone

TD_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_field(d, snake, camel):
    """Get a value from a dict trying snake_case then camelCase key."""
    if snake in d:
        return d.get(snake)
    return d.get(camel)


def _parse_timestamp(value):
    """Parse an API timestamp into an aware UTC datetime, or None.

    Handles "2020-06-11 10:25:10 UTC", RFC 3339 with or without fraction
    and "Z", and Unix epoch seconds (int or numeric string).
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    text = str(value).strip()
    if isinstance(value, (int, float)) or text.isdigit():
        try:
            return datetime.fromtimestamp(float(text), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    if text.endswith(" UTC"):
        try:
            return datetime.strptime(text[:-4], TD_TIME_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_td_time(value, empty="-"):
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS`` in UTC."""
    parsed = _parse_timestamp(value)
    if parsed is None:
        return empty
    return parsed.strftime(TD_TIME_FORMAT)


def _duration_seconds(start, end):
    """Seconds between two API timestamps, or None when either is missing."""
    started = _parse_timestamp(start)
    ended = _parse_timestamp(end)
    if started is None or ended is None:
        return None
    return (ended - started).total_seconds()


def _text(value, empty=""):
    """Stringify a scalar for display. None becomes *empty*."""
    if value is None:
        return empty
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
