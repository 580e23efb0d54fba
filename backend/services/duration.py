"""
Battery Charging Log - Charge Duration
Version: 1.0.0

Turns the start/end wall-clock times of a charge into the display string
shown in the read-only duration field. Overnight charges roll over to the
next day.
"""

import re
from typing import Optional

MINUTES_PER_DAY = 24 * 60

# HH:MM, tolerating the :SS suffix some time pickers send
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def parse_clock(value: Optional[str]) -> Optional[int]:
    """Minutes since midnight for an HH:MM string, or None if malformed"""
    if not value:
        return None
    match = _CLOCK_RE.match(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def format_minutes(total: int) -> str:
    hours, minutes = divmod(total, 60)
    if total == 0:
        return "0 mins"
    if minutes == 0:
        return f"{hours} hours"
    if hours == 0:
        return f"{minutes} mins"
    return f"{hours} hours {minutes} mins"


def compute_duration(start: Optional[str], end: Optional[str]) -> str:
    """
    Elapsed time between two HH:MM times on the same day.

    An end earlier than the start is taken to be on the following day.
    Returns "" when either time is missing or malformed, meaning the
    duration is not computable yet.

    >>> compute_duration("09:00", "10:30")
    '1 hours 30 mins'
    >>> compute_duration("23:30", "00:15")
    '45 mins'
    """
    start_min = parse_clock(start)
    end_min = parse_clock(end)
    if start_min is None or end_min is None:
        return ""
    if end_min < start_min:
        end_min += MINUTES_PER_DAY
    return format_minutes(end_min - start_min)
