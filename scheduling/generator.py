"""
Slot generation.

Expands one weekly availability template into concrete candidate slots over a
date range. This module is pure: it never touches the database. Persisting the
candidates (and skipping duplicates) is done by ``scheduling.timeslots``.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterator, List

from models.enums import DayOfWeek
from scheduling.errors import ValidationError
from scheduling.timeutil import days_of_week_in_range, format_time, from_minutes, parse_time, to_minutes

MIN_SESSION_MINUTES = 15
MAX_SESSION_MINUTES = 240
MIN_BREAK_MINUTES = 0
MAX_BREAK_MINUTES = 60


@dataclass(frozen=True)
class SlotCandidate:
    therapist_id: str
    template_id: int
    date: date
    start_time: str
    end_time: str

    def as_dict(self):
        return {
            "therapist_id": self.therapist_id,
            "template_id": self.template_id,
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


def parse_day(value) -> DayOfWeek:
    try:
        return DayOfWeek((value or "").strip().lower())
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid day of week {value!r}")


def _bounded_int(value, name, low, high) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")
    if number != value and not isinstance(value, str):
        raise ValidationError(f"{name} must be an integer")
    if not low <= number <= high:
        raise ValidationError(f"{name} must be {low}-{high} minutes")
    return number


def validate_template(template, require_fit=True):
    """Re-check the template fields (format and bounds).

    With ``require_fit`` the template must also hold at least one full session
    between start and end; creation and update use this, the generator does
    not (an unfit template just yields nothing).
    """
    parse_day(template.day_of_week)
    start = parse_time(template.start_time)
    end = parse_time(template.end_time)
    duration = _bounded_int(template.session_duration, "sessionDuration", MIN_SESSION_MINUTES, MAX_SESSION_MINUTES)
    _bounded_int(template.break_time, "breakTime", MIN_BREAK_MINUTES, MAX_BREAK_MINUTES)

    if require_fit:
        if start >= end:
            raise ValidationError("startTime must be before endTime")
        if to_minutes(end) - to_minutes(start) < duration:
            raise ValidationError("At least one full session must fit between startTime and endTime")


def day_slots(template, on_date: date) -> Iterator[SlotCandidate]:
    start = to_minutes(parse_time(template.start_time))
    end = to_minutes(parse_time(template.end_time))
    duration = int(template.session_duration)
    step = duration + int(template.break_time)

    # step >= 15, so the cursor strictly increases; end <= 23:59 keeps results in the day
    cursor = start
    while cursor + duration <= end:
        yield SlotCandidate(
            therapist_id=template.therapist_id,
            template_id=template.id,
            date=on_date,
            start_time=format_time(from_minutes(cursor)),
            end_time=format_time(from_minutes(cursor + duration)),
        )
        cursor += step


def iter_candidates(template, start_date, end_date) -> Iterator[SlotCandidate]:
    validate_template(template, require_fit=False)
    wanted = parse_day(template.day_of_week)
    for day, name in days_of_week_in_range(start_date, end_date):
        if name is wanted:
            yield from day_slots(template, day)


def generate(template, start_date, end_date) -> List[SlotCandidate]:
    """Ordered candidate slots for every matching weekday in ``[start_date, end_date]``."""
    return list(iter_candidates(template, start_date, end_date))
