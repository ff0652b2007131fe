"""
Period resolution: turn a period keyword or ISO date into a timestamp range.

Ranges cover whole local days and are inclusive at both ends:
``YYYY-MM-DDT00:00:00`` through ``YYYY-MM-DDT23:59:59``.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Optional, Sequence

from .errors import InvalidPeriod
from .types import TIMESTAMP_FORMAT

DEFAULT_PERIOD = "today"

# keyword -> (days back for start, days back for end)
PERIOD_OFFSETS = {
    "today": (0, 0),
    "yesterday": (1, 1),
    "lastweek": (6, 0),
    "last_week": (6, 0),
    "lastmonth": (29, 0),
    "last_month": (29, 0),
}

SUPPORTED_PERIODS = ("today", "yesterday", "lastweek", "lastmonth", "YYYY-MM-DD")

_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_END_OF_DAY = time(23, 59, 59)


class Period(NamedTuple):
    """Inclusive timestamp range."""
    start: str
    end: str


def parse_iso_date(value: str) -> Optional[date]:
    """Parse a strict YYYY-MM-DD date; None if malformed or not a real day."""
    if not _ISO_DATE_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def day_bounds(start_day: date, end_day: date) -> Period:
    """Range from midnight of start_day to 23:59:59 of end_day."""
    start = datetime.combine(start_day, time.min)
    end = datetime.combine(end_day, _END_OF_DAY)
    return Period(start.strftime(TIMESTAMP_FORMAT), end.strftime(TIMESTAMP_FORMAT))


def resolve_period(args: Sequence[str], today: Optional[date] = None) -> Period:
    """
    Resolve period arguments to an inclusive timestamp range.

    Only the first argument is considered; no arguments means "today".
    Keywords are case-sensitive.

    Args:
        args: Period tokens (marker tokens already removed)
        today: Reference day, defaults to the local date

    Raises:
        InvalidPeriod: If the token is neither a keyword nor a valid date
    """
    key = args[0] if args else DEFAULT_PERIOD
    if today is None:
        today = date.today()

    if key in PERIOD_OFFSETS:
        start_back, end_back = PERIOD_OFFSETS[key]
        return day_bounds(today - timedelta(days=start_back), today - timedelta(days=end_back))

    parsed = parse_iso_date(key)
    if parsed is None:
        raise InvalidPeriod(key, SUPPORTED_PERIODS)
    return day_bounds(parsed, parsed)
