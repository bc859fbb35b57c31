import logging

from models.enums import DayOfWeek, RecordState
from models.template import AvailabilityTemplate
from scheduling.errors import NotFound, ValidationError
from scheduling.generator import parse_day, validate_template
from scheduling.store import SqlAlchemyStore
from scheduling.timeutil import normalize_time, parse_time
from utils.clock import utcnow

logger = logging.getLogger(__name__)

# fields a provider may change after creation
EDITABLE_FIELDS = ("day_of_week", "start_time", "end_time", "session_duration", "break_time")

_DAY_ORDER = {day.value: index for index, day in enumerate(DayOfWeek)}


def _normalized(template):
    template.day_of_week = parse_day(template.day_of_week).value
    template.start_time = normalize_time(template.start_time)
    template.end_time = normalize_time(template.end_time)
    template.session_duration = int(template.session_duration)
    template.break_time = int(template.break_time)


def create_template(therapist_id, day_of_week, start_time, end_time, session_duration, break_time=0, store=None):
    store = store or SqlAlchemyStore()
    therapist_id = (str(therapist_id) if therapist_id is not None else "").strip()
    if not therapist_id:
        raise ValidationError("therapistId is required")

    template = AvailabilityTemplate(
        therapist_id=therapist_id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        session_duration=session_duration,
        break_time=break_time,
        state=RecordState.ACTIVE.value,
    )
    validate_template(template)
    _normalized(template)

    store.add_template(template)
    store.commit()
    logger.info("template %s created for therapist %s (%s)", template.id, therapist_id, template.day_of_week)
    return template


def get_template(template_id, store=None):
    store = store or SqlAlchemyStore()
    template = store.find_template(template_id)
    if template is None or not template.is_active:
        raise NotFound("Template not found")
    return template


def list_templates(therapist_id, store=None):
    store = store or SqlAlchemyStore()
    templates = store.active_templates(therapist_id)
    return sorted(templates, key=lambda t: (_DAY_ORDER.get(t.day_of_week, 7), parse_time(t.start_time), t.id))


def update_template(template_id, changes: dict, store=None):
    """Apply a partial edit. Slots generated earlier are left as they are."""
    store = store or SqlAlchemyStore()
    template = get_template(template_id, store=store)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    for field, value in changes.items():
        setattr(template, field, value)
    try:
        validate_template(template)
        _normalized(template)
    except ValidationError:
        store.rollback()
        raise

    store.commit()
    return template


def delete_template(template_id, store=None):
    store = store or SqlAlchemyStore()
    template = get_template(template_id, store=store)
    template.state = RecordState.DELETED.value
    template.state_changed_at = utcnow()
    store.commit()
    logger.info("template %s deleted", template_id)
    return template
