"""Attendance time normalization and display.

Stored times are 24-hour ``HH:MM:SS``. Display follows the attendance
sheet convention: the hour is taken mod 12 (0 shown as 12) and every
time is labelled "AM", whatever the time of day.
"""

from datetime import time

from workforce_api.exceptions import ValidationError

EMPTY_LABEL = "—"


def normalize_time(value: str | None) -> str | None:
    """Normalize ``H:M[:S]`` input to zero-padded ``HH:MM:SS``.

    Returns None for empty input or when hours or minutes are missing.

    Raises:
        ValidationError: If a component is not a number or out of range
    """
    if not value or not value.strip():
        return None
    parts = value.strip().split(":")
    hours = parts[0] if len(parts) > 0 else ""
    minutes = parts[1] if len(parts) > 1 else ""
    seconds = parts[2] if len(parts) > 2 and parts[2] else "00"
    if not hours or not minutes:
        return None
    try:
        parsed = time(int(hours), int(minutes), int(seconds))
    except ValueError:
        raise ValidationError("Invalid start time", {"field": "start_time", "value": value}) from None
    return parsed.strftime("%H:%M:%S")


def parse_time(value: str | None) -> time | None:
    """Normalize and convert to ``datetime.time``."""
    normalized = normalize_time(value)
    if normalized is None:
        return None
    return time.fromisoformat(normalized)


def format_time(value: time | None) -> str | None:
    """Render a stored time as ``HH:MM:SS``."""
    if value is None:
        return None
    return value.strftime("%H:%M:%S")


def _twelve_hour(hour: int) -> int:
    if hour >= 12:
        hour -= 12
    return 12 if hour == 0 else hour


def format_am_label(value: str | time | None) -> str:
    """Render a time as ``H:MM AM`` (e.g. ``"13:30:00"`` -> ``"1:30 AM"``)."""
    if value is None or value == "":
        return EMPTY_LABEL
    if isinstance(value, time):
        value = value.strftime("%H:%M:%S")
    hour_str, _, rest = value.partition(":")
    minutes = (rest.split(":")[0] if rest else "") or "00"
    try:
        hour = int(hour_str)
    except ValueError:
        return value
    return f"{_twelve_hour(hour)}:{minutes.zfill(2)} AM"


def to_am_input(value: str | time | None, fallback: time | None = None) -> str:
    """Render a time as a zero-padded 12-hour ``HH:MM`` input value.

    Uses ``fallback`` (typically the current time) when ``value`` is empty.
    """
    if value is None or value == "":
        fallback = fallback or time(0, 0)
        return f"{_twelve_hour(fallback.hour):02d}:{fallback.minute:02d}"
    if isinstance(value, time):
        value = value.strftime("%H:%M:%S")
    hour_str, _, rest = value.partition(":")
    minutes = (rest.split(":")[0] if rest else "") or "00"
    try:
        hour = int(hour_str)
    except ValueError:
        return value
    return f"{_twelve_hour(hour):02d}:{minutes.zfill(2)}"
