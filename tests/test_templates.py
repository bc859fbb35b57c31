import pytest

from models import db
from models.enums import RecordState
from models.template import AvailabilityTemplate
from scheduling import templates as template_service
from scheduling import timeslots as slot_service
from scheduling.errors import NotFound, ValidationError
from tests.conftest import MONDAY


def test_create_template_normalizes_fields(make_template):
    t = make_template(day_of_week="Monday", start_time="9:00", end_time="17:00")

    assert t.id is not None
    assert t.day_of_week == "monday"
    assert t.start_time == "09:00"
    assert t.state == RecordState.ACTIVE.value


@pytest.mark.parametrize("overrides", [
    {"therapist_id": ""},
    {"day_of_week": "someday"},
    {"start_time": "25:00"},
    {"start_time": "12:00", "end_time": "09:00"},
    {"start_time": "09:00", "end_time": "09:00"},
    {"start_time": "09:00", "end_time": "09:20", "session_duration": 30},
    {"session_duration": 14},
    {"session_duration": 300},
    {"break_time": 90},
    {"session_duration": "abc"},
])
def test_create_template_rejects_invalid(make_template, overrides):
    with pytest.raises(ValidationError):
        make_template(**overrides)
    assert AvailabilityTemplate.query.count() == 0


def test_list_templates_orders_by_weekday_and_skips_deleted(make_template):
    friday = make_template(day_of_week="friday")
    monday_late = make_template(start_time="13:00", end_time="15:00")
    monday_early = make_template()
    gone = make_template(day_of_week="tuesday")
    make_template(therapist_id="someone-else")
    template_service.delete_template(gone.id)

    listed = template_service.list_templates("therapist-1")

    assert [t.id for t in listed] == [monday_early.id, monday_late.id, friday.id]


def test_update_template_revalidates_and_keeps_generated_slots(make_template):
    t = make_template()
    slot_service.generate_slots(t.id, MONDAY, MONDAY)

    template_service.update_template(t.id, {"session_duration": 90, "break_time": 0})

    slots = slot_service.list_all("therapist-1")
    assert [s.end_time for s in slots] == ["09:50", "10:50", "11:50"]

    with pytest.raises(ValidationError):
        template_service.update_template(t.id, {"end_time": "08:00"})
    db.session.refresh(t)
    assert t.end_time == "12:00"
    assert t.session_duration == 90


def test_update_template_rejects_unknown_fields(make_template):
    t = make_template()
    with pytest.raises(ValidationError):
        template_service.update_template(t.id, {"therapist_id": "other"})


def test_delete_template_is_soft(make_template):
    t = make_template()
    template_service.delete_template(t.id)

    row = db.session.get(AvailabilityTemplate, t.id)
    assert row is not None
    assert row.state == RecordState.DELETED.value
    assert row.state_changed_at is not None

    with pytest.raises(NotFound):
        template_service.delete_template(t.id)
    with pytest.raises(NotFound):
        slot_service.generate_slots(t.id, MONDAY, MONDAY)


def test_missing_template(app):
    with pytest.raises(NotFound):
        template_service.update_template(999, {"break_time": 5})
