from datetime import date
from types import SimpleNamespace

import pytest

from scheduling.errors import ValidationError
from scheduling.generator import generate, validate_template


def _template(**overrides):
    fields = dict(
        id=7,
        therapist_id="t-1",
        day_of_week="monday",
        start_time="09:00",
        end_time="10:10",
        session_duration=30,
        break_time=10,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_break_time_spaces_sessions():
    slots = generate(_template(), date(2024, 1, 1), date(2024, 1, 1))

    assert [(s.start_time, s.end_time) for s in slots] == [("09:00", "09:30"), ("09:40", "10:10")]
    assert all(s.therapist_id == "t-1" and s.template_id == 7 for s in slots)


def test_only_matching_weekdays_are_expanded():
    slots = generate(_template(day_of_week="wednesday"), date(2024, 1, 1), date(2024, 1, 14))

    assert sorted({s.date for s in slots}) == [date(2024, 1, 3), date(2024, 1, 10)]
    assert len(slots) == 4


def test_candidates_are_ordered_by_date_then_start():
    slots = generate(_template(end_time="12:00", break_time=0), date(2024, 1, 1), date(2024, 1, 31))
    keys = [(s.date, s.start_time) for s in slots]

    assert keys == sorted(keys)
    assert len(slots) == 5 * 6  # five Mondays, six 30-minute sessions each


def test_template_without_room_for_a_session_yields_nothing():
    t = _template(start_time="09:00", end_time="09:20", session_duration=30)
    assert generate(t, date(2024, 1, 1), date(2024, 3, 1)) == []


def test_inverted_date_range_yields_nothing():
    assert generate(_template(), date(2024, 1, 8), date(2024, 1, 1)) == []


def test_last_session_may_end_exactly_at_end_time():
    slots = generate(_template(start_time="22:00", end_time="23:59", session_duration=119, break_time=0),
                     date(2024, 1, 1), date(2024, 1, 1))
    assert [(s.start_time, s.end_time) for s in slots] == [("22:00", "23:59")]


@pytest.mark.parametrize("overrides", [
    {"session_duration": 10},
    {"session_duration": 241},
    {"break_time": -1},
    {"break_time": 61},
    {"start_time": "9h00"},
    {"day_of_week": "funday"},
])
def test_generator_rechecks_template_fields(overrides):
    with pytest.raises(ValidationError):
        generate(_template(**overrides), date(2024, 1, 1), date(2024, 1, 7))


def test_fit_is_required_only_when_asked():
    t = _template(start_time="10:00", end_time="09:00")
    validate_template(t, require_fit=False)
    with pytest.raises(ValidationError):
        validate_template(t)
