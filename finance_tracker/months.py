"""
Month Keys

Every MonthlyData record is keyed by a "YYYY-MM" string. The format is
zero-padded so that plain string ordering matches calendar ordering.
"""

import re
from datetime import date, datetime
from typing import Iterable, Optional


MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class InvalidMonthError(ValueError):
    """Month key is not of the form YYYY-MM."""
    pass


def current_month(moment: Optional[datetime] = None) -> str:
    """
    Get the "YYYY-MM" key for a moment in the local calendar.

    Aware datetimes are converted to local time first, so a UTC clock
    still yields the month the user sees on their wall calendar.
    """
    if moment is None:
        moment = datetime.now()
    elif moment.tzinfo is not None:
        moment = moment.astimezone()
    return f"{moment.year:04d}-{moment.month:02d}"


def parse_month(month: str) -> tuple[int, int]:
    """Split a month key into (year, month)."""
    match = MONTH_KEY_PATTERN.match(month) if isinstance(month, str) else None
    if match is None:
        raise InvalidMonthError(f"Invalid month key: {month!r} (expected YYYY-MM)")
    return int(match.group(1)), int(match.group(2))


def validate_month(month: str) -> str:
    """Return the key unchanged, or raise InvalidMonthError."""
    parse_month(month)
    return month


def month_of(value: date) -> str:
    """Month key a calendar date falls in."""
    return f"{value.year:04d}-{value.month:02d}"


def shift_month(month: str, delta: int) -> str:
    """Move a month key forward (delta > 0) or back (delta < 0)."""
    year, mon = parse_month(month)
    index = year * 12 + (mon - 1) + delta
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def previous_month(month: str) -> str:
    return shift_month(month, -1)


def next_month(month: str) -> str:
    return shift_month(month, 1)


def month_label(month: str) -> str:
    """Human-readable month, e.g. "June 2024"."""
    year, mon = parse_month(month)
    return f"{MONTH_NAMES[mon - 1]} {year}"


def navigation_months(available: Iterable[str], current: str) -> list[str]:
    """
    Months to offer in a month picker.

    The current month is always included, even before anything has been
    recorded for it. Most recent first.
    """
    months = set(available)
    months.add(current)
    return sorted(months, reverse=True)
