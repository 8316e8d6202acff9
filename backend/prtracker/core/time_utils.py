from datetime import date

from prtracker.core.constants import MAX_MINUTES_SECONDS
from prtracker.core.errors import ValidationError


def _component(value) -> int:
    if value is None or value == "":
        return 0
    return int(value)


def format_for_display(hours=None, minutes=None, seconds=None) -> str:
    """
    Zero-pad each time component and join with ':'.
    Missing components render as '00'.
    Example: ('', '20', '5') -> '00:20:05'
    """
    parts = (_component(hours), _component(minutes), _component(seconds))
    return ":".join(f"{p:02d}" for p in parts)


def split_time_text(text: str) -> tuple[int, int, int]:
    """Parse a free-text time into (hours, minutes, seconds).

    Accepts 'MM:SS' and 'H:MM:SS'. This is the only place a single time
    string is turned into the structured representation.
    """
    s = (text or "").strip()
    parts = s.split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValidationError("Time must look like MM:SS or HH:MM:SS")
    if len(parts) == 2:
        parts.insert(0, "0")

    hours, minutes, seconds = map(int, parts)
    if minutes > MAX_MINUTES_SECONDS or seconds > MAX_MINUTES_SECONDS:
        raise ValidationError("Minutes and seconds must be between 0 and 59")
    return hours, minutes, seconds


def format_date_achieved(d: date | None) -> str | None:
    """Format a date like 'Jan 5, 2025'. Returns None if d is None."""
    if d is None:
        return None
    return f"{d.strftime('%b')} {d.day}, {d.year}"
