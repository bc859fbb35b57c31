"""
Booking state machine.

    Available --create--> Booked(confirmed) --cancel--> Cancelled (slot released)
                                            --update_status--> Completed / NoShow

The slot row is the source of truth for bookability and is only flipped
through the store's conditional writes. The booking keeps its own snapshot of
the session date and times.
"""
import logging
import secrets
import string

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models.booking import Booking
from models.enums import SETTABLE_STATUSES, BookingStatus
from scheduling.errors import Conflict, NotFound, ValidationError
from scheduling.store import MarkResult, SqlAlchemyStore
from scheduling.timeutil import parse_date
from utils.clock import utcnow

logger = logging.getLogger(__name__)

_REF_ALPHABET = string.ascii_uppercase + string.digits


def new_booking_ref() -> str:
    prefix = current_app.config.get("BOOKING_REF_PREFIX", "BK")
    suffix = "".join(secrets.choice(_REF_ALPHABET) for _ in range(5))
    return f"{prefix}{utcnow().strftime('%Y%m%d%H%M%S')}{suffix}"


def _required(value, name):
    value = (str(value) if value is not None else "").strip()
    if not value:
        raise ValidationError(f"{name} is required")
    return value


def parse_status(value, allowed=None) -> BookingStatus:
    try:
        status = BookingStatus((value or "").strip().lower())
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid status {value!r}")
    if allowed is not None and status not in allowed:
        raise ValidationError(f"Invalid status {value!r}")
    return status


def create_booking(patient_id, time_slot_id, notes="", store=None) -> Booking:
    store = store or SqlAlchemyStore()
    patient_id = _required(patient_id, "patientId")

    # fast path; the conditional write below is what decides
    slot = store.find_slot(time_slot_id)
    if slot is None or not slot.is_active:
        raise NotFound("Time slot not found")
    if slot.is_booked:
        raise Conflict("Time slot already booked")

    try:
        outcome = store.conditional_mark_booked(slot.id, patient_id)
        if outcome is MarkResult.NOT_FOUND:
            store.rollback()
            raise NotFound("Time slot not found")
        if outcome is MarkResult.ALREADY_BOOKED:
            store.rollback()
            raise Conflict("Time slot already booked")

        # the slot is held now; copy its times as they stand, not as first read
        held = store.slot_snapshot(slot.id)
        booking = Booking(
            booking_ref=new_booking_ref(),
            patient_id=patient_id,
            slot_id=slot.id,
            status=BookingStatus.CONFIRMED.value,
            notes=notes or "",
            therapist_id=held.therapist_id,
            session_date=held.date,
            session_start_time=held.start_time,
            session_end_time=held.end_time,
        )
        store.insert_booking(booking)
        store.commit()
    except IntegrityError:
        # the active-booking index (or the reference) refused the row; nothing persisted
        store.rollback()
        raise Conflict("Time slot already booked")
    except Exception:
        store.rollback()
        raise

    logger.info("booking %s: patient %s took slot %s", booking.booking_ref, patient_id, booking.slot_id)
    return booking


def get_booking(booking_id, store=None) -> Booking:
    store = store or SqlAlchemyStore()
    booking = store.find_booking(booking_id)
    if booking is None:
        raise NotFound("Booking not found")
    return booking


def get_booking_by_ref(booking_ref, store=None) -> Booking:
    store = store or SqlAlchemyStore()
    booking = store.find_booking_by_ref(booking_ref)
    if booking is None:
        raise NotFound("Booking not found")
    return booking


def cancel_booking(booking_id, reason, cancelled_by, store=None) -> Booking:
    store = store or SqlAlchemyStore()
    reason = _required(reason, "cancellationReason")
    cancelled_by = _required(cancelled_by, "cancelledBy")

    booking = get_booking(booking_id, store=store)
    if booking.status == BookingStatus.CANCELLED.value:
        raise Conflict("Booking already cancelled")

    try:
        if not store.conditional_cancel(booking.id, reason, cancelled_by):
            store.rollback()
            raise Conflict("Booking already cancelled")
        store.mark_slot_available(booking.slot_id)
        store.commit()
    except Conflict:
        raise
    except Exception:
        store.rollback()
        raise

    logger.info("booking %s cancelled by %s", booking.booking_ref, cancelled_by)
    return booking


def update_booking_status(booking_id, status, store=None) -> Booking:
    """Set confirmed / completed / no-show. The slot is left as it is."""
    store = store or SqlAlchemyStore()
    new_status = parse_status(status, allowed=SETTABLE_STATUSES)

    booking = get_booking(booking_id, store=store)
    if booking.status == BookingStatus.CANCELLED.value:
        raise Conflict("Booking is cancelled; its slot has been released")

    try:
        if not store.update_booking(booking.id, status=new_status.value):
            store.rollback()
            if store.booking_status(booking.id) is None:
                raise NotFound("Booking not found")
            raise Conflict("Booking is cancelled; its slot has been released")
        store.commit()
    except (Conflict, NotFound):
        raise
    except Exception:
        store.rollback()
        raise

    logger.info("booking %s set to %s", booking.booking_ref, new_status.value)
    return get_booking(booking.id, store=store)


def _list(store, status=None, start_date=None, end_date=None, **owner):
    store = store or SqlAlchemyStore()
    return store.query_bookings(
        status=parse_status(status).value if status else None,
        start_date=parse_date(start_date) if start_date else None,
        end_date=parse_date(end_date) if end_date else None,
        **owner,
    )


def list_patient_bookings(patient_id, status=None, start_date=None, end_date=None, store=None):
    return _list(store, status, start_date, end_date, patient_id=patient_id)


def list_therapist_bookings(therapist_id, status=None, start_date=None, end_date=None, store=None):
    return _list(store, status, start_date, end_date, therapist_id=therapist_id)
