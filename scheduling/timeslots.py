import logging
from dataclasses import dataclass, field
from typing import List

from flask import current_app
from sqlalchemy.exc import IntegrityError

from scheduling.errors import Conflict, NotFound, ValidationError
from scheduling.generator import SlotCandidate, iter_candidates
from scheduling.store import InsertResult, SqlAlchemyStore
from scheduling.timeutil import normalize_time, parse_date, parse_time
from utils.clock import today

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    generated: list = field(default_factory=list)
    skipped: List[SlotCandidate] = field(default_factory=list)


def generate_slots(template_id, start_date, end_date, store=None) -> GenerationResult:
    """Expand a template over ``[start_date, end_date]`` and persist the slots.

    Each candidate is inserted on its own. Duplicates of an existing active
    slot (same therapist, date and start time) are reported in ``skipped``;
    any other store failure propagates and stops the batch, leaving the
    slots already inserted in place.
    """
    store = store or SqlAlchemyStore()
    template = store.find_template(template_id)
    if template is None or not template.is_active:
        raise NotFound("Template not found")

    start = parse_date(start_date)
    end = parse_date(end_date)
    max_days = current_app.config.get("MAX_GENERATION_DAYS", 366)
    if (end - start).days + 1 > max_days:
        raise ValidationError(f"Date range may cover at most {max_days} days")

    result = GenerationResult()
    for candidate in iter_candidates(template, start, end):
        outcome, slot = store.insert_slot_if_absent(candidate)
        if outcome is InsertResult.INSERTED:
            result.generated.append(slot)
        else:
            result.skipped.append(candidate)

    logger.info(
        "template %s %s..%s: generated=%d skipped=%d",
        template_id, start, end, len(result.generated), len(result.skipped),
    )
    return result


def get_slot(slot_id, store=None):
    store = store or SqlAlchemyStore()
    slot = store.find_slot(slot_id)
    if slot is None or not slot.is_active:
        raise NotFound("Time slot not found")
    return slot


def _date_filters(start_date=None, end_date=None):
    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None
    return start, end


def list_available(therapist_id, start_date=None, end_date=None, store=None, on_or_after=None):
    """Active, unbooked slots dated today or later, by date then start time."""
    store = store or SqlAlchemyStore()
    start, end = _date_filters(start_date, end_date)
    return store.query_slots(
        therapist_id,
        start_date=start,
        end_date=end,
        is_booked=False,
        not_before=on_or_after or today(),
    )


def list_all(therapist_id, start_date=None, end_date=None, is_booked=None, store=None):
    """Every active slot for the therapist, past ones included."""
    store = store or SqlAlchemyStore()
    start, end = _date_filters(start_date, end_date)
    return store.query_slots(therapist_id, start_date=start, end_date=end, is_booked=is_booked)


def update_slot(slot_id, changes: dict, store=None):
    """Edit one slot's date or times. Existing bookings keep their own snapshot."""
    store = store or SqlAlchemyStore()
    slot = get_slot(slot_id, store=store)

    unknown = set(changes) - {"date", "start_time", "end_time"}
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    new_date = parse_date(changes["date"]) if "date" in changes else slot.date
    new_start = normalize_time(changes.get("start_time", slot.start_time))
    new_end = normalize_time(changes.get("end_time", slot.end_time))
    if parse_time(new_start) >= parse_time(new_end):
        raise ValidationError("startTime must be before endTime")

    if store.active_slot_exists(slot.therapist_id, new_date, new_start, exclude_id=slot.id):
        raise Conflict("Another slot already exists for that therapist, date and start time")

    slot.date = new_date
    slot.start_time = new_start
    slot.end_time = new_end
    try:
        store.commit()
    except IntegrityError:
        store.rollback()
        raise Conflict("Another slot already exists for that therapist, date and start time")
    return slot


def delete_slot(slot_id, store=None):
    store = store or SqlAlchemyStore()
    slot = get_slot(slot_id, store=store)
    if not store.retire_unbooked_slot(slot.id):
        store.rollback()
        raise Conflict("Time slot is booked; cancel the booking first")
    store.commit()
    return slot
