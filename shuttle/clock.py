"""Time-of-day parsing and same-day target arithmetic."""

from datetime import datetime, timedelta
from typing import NamedTuple
from zoneinfo import ZoneInfo

from config import TIMEZONE
from shuttle.exceptions import FormatError

SECONDS_PER_DAY = 24 * 3600


class TimeOfDay(NamedTuple):
    hour: int
    minute: int
    second: int

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


def now(tz: str = TIMEZONE) -> datetime:
    return datetime.now(ZoneInfo(tz))


def parse_time_of_day(text: str) -> TimeOfDay:
    """Parse ``HH:MM:SS`` into a TimeOfDay. Raises FormatError."""
    parts = [p.strip() for p in str(text).strip().split(":")]
    if len(parts) != 3 or not all(p.isdecimal() for p in parts):
        raise FormatError(f"Invalid time '{text}'. Use HH:MM:SS, e.g. 15:10:22.")
    hour, minute, second = (int(p) for p in parts)
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise FormatError(f"Time '{text}' is out of range.")
    return TimeOfDay(hour, minute, second)


def resolve_target_instant(tod: TimeOfDay, now: datetime) -> datetime:
    """Return ``tod`` on ``now``'s calendar date.

    Never rolls over to tomorrow: a time that already passed today resolves
    to an instant in the past, and callers reject it.
    """
    return now.replace(hour=tod.hour, minute=tod.minute, second=tod.second, microsecond=0)


def delay_until(target: datetime, now: datetime) -> timedelta:
    return target - now


def is_future(target: datetime, now: datetime) -> bool:
    return delay_until(target, now) > timedelta(0)


def seconds_since_midnight(value: TimeOfDay | datetime) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second
