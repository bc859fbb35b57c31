"""
Wall-clock time helpers.

Times are local "HH:MM" strings; sessions never span midnight, so every value
here lives inside a single day (00:00 - 23:59).
"""
import enum
import re
from datetime import date, datetime, timedelta
from typing import Iterator, NamedTuple, Tuple

from models.enums import DayOfWeek
from scheduling.errors import ValidationError

# hour may be given with one digit on input ("9:00"); output is always zero padded
_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

MINUTES_PER_DAY = 24 * 60


class WallTime(NamedTuple):
    hour: int
    minute: int

    def __str__(self):
        return format_time(self)


class Order(enum.Enum):
    BEFORE = -1
    EQUAL = 0
    AFTER = 1


def parse_time(value) -> WallTime:
    if isinstance(value, WallTime):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Invalid time {value!r}. Use HH:MM")
    m = _TIME_RE.match(value.strip())
    if not m:
        raise ValidationError(f"Invalid time {value!r}. Use HH:MM")
    return WallTime(int(m.group(1)), int(m.group(2)))


def format_time(t: WallTime) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def normalize_time(value) -> str:
    return format_time(parse_time(value))


def to_minutes(t: WallTime) -> int:
    return t.hour * 60 + t.minute


def from_minutes(total: int) -> WallTime:
    if total < 0 or total >= MINUTES_PER_DAY:
        raise ValidationError("Time falls outside a single day")
    return WallTime(*divmod(total, 60))


def add_minutes(t, n: int) -> WallTime:
    """Add ``n`` minutes; raises ValidationError if the result would cross midnight."""
    return from_minutes(to_minutes(parse_time(t)) + n)


def minutes_between(start, end) -> int:
    return to_minutes(parse_time(end)) - to_minutes(parse_time(start))


def compare(t1, t2) -> Order:
    a, b = parse_time(t1), parse_time(t2)
    if a < b:
        return Order.BEFORE
    if a > b:
        return Order.AFTER
    return Order.EQUAL


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat((value or "").strip()[:10])
    except (AttributeError, TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}. Use YYYY-MM-DD")


def day_name(d: date) -> DayOfWeek:
    return DayOfWeek.from_weekday(d.weekday())


class DateRange:
    """Inclusive range of calendar dates; iterating yields ``(date, DayOfWeek)``.

    Iteration is stateless, so the same range can be walked any number of
    times. An inverted range is simply empty.
    """

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[Tuple[date, DayOfWeek]]:
        current = self.start
        while current <= self.end:
            yield current, day_name(current)
            current += timedelta(days=1)

    def __len__(self):
        return max((self.end - self.start).days + 1, 0)

    def __repr__(self):
        return f"DateRange({self.start.isoformat()}, {self.end.isoformat()})"


def days_of_week_in_range(start, end) -> DateRange:
    return DateRange(parse_date(start), parse_date(end))
