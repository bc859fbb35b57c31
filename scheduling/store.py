"""
Persistence contract for the scheduling core, backed by Flask-SQLAlchemy.

Every write that guards an invariant is a single conditional statement
(``UPDATE ... WHERE``) whose row count tells the caller whether the
precondition held at write time. Reads here are fast paths only.

Methods do not commit unless their docstring says so; callers own the unit of
work through ``commit()`` / ``rollback()``.
"""
import enum
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking
from models.enums import BookingStatus, RecordState
from models.slot import Slot
from models.template import AvailabilityTemplate
from utils.clock import utcnow

logger = logging.getLogger(__name__)


class InsertResult(enum.Enum):
    INSERTED = "inserted"
    CONFLICT = "conflict"


class MarkResult(enum.Enum):
    OK = "ok"
    ALREADY_BOOKED = "already_booked"
    NOT_FOUND = "not_found"


class SqlAlchemyStore:
    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    # ---------- templates ----------
    def find_template(self, template_id):
        return self.session.get(AvailabilityTemplate, template_id)

    def add_template(self, template):
        self.session.add(template)
        self.session.flush()
        return template

    def active_templates(self, therapist_id):
        stmt = (
            select(AvailabilityTemplate)
            .where(
                AvailabilityTemplate.therapist_id == therapist_id,
                AvailabilityTemplate.state == RecordState.ACTIVE.value,
            )
            .order_by(AvailabilityTemplate.id.asc())
        )
        return list(self.session.scalars(stmt))

    # ---------- slots ----------
    def find_slot(self, slot_id):
        return self.session.get(Slot, slot_id)

    def active_slot_exists(self, therapist_id, on_date, start_time, exclude_id=None) -> bool:
        stmt = select(Slot.id).where(
            Slot.therapist_id == therapist_id,
            Slot.date == on_date,
            Slot.start_time == start_time,
            Slot.state == RecordState.ACTIVE.value,
        )
        if exclude_id is not None:
            stmt = stmt.where(Slot.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def insert_slot_if_absent(self, candidate):
        """Insert and commit one slot. Returns ``(InsertResult, slot or None)``.

        The existence check avoids a doomed insert; the partial unique index on
        (therapist_id, date, start_time) is what actually guarantees no
        duplicates when two generators race.
        """
        if self.active_slot_exists(candidate.therapist_id, candidate.date, candidate.start_time):
            return InsertResult.CONFLICT, None

        slot = Slot(
            therapist_id=candidate.therapist_id,
            template_id=candidate.template_id,
            date=candidate.date,
            start_time=candidate.start_time,
            end_time=candidate.end_time,
        )
        self.session.add(slot)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.debug("slot insert lost uniqueness race: %s", candidate)
            return InsertResult.CONFLICT, None
        return InsertResult.INSERTED, slot

    def conditional_mark_booked(self, slot_id, booked_by) -> MarkResult:
        result = self.session.execute(
            update(Slot)
            .where(
                Slot.id == slot_id,
                Slot.state == RecordState.ACTIVE.value,
                Slot.is_booked.is_(False),
            )
            .values(is_booked=True, booked_by=booked_by)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            self._expire_cached(Slot, slot_id)
            return MarkResult.OK

        row = self.session.execute(
            select(Slot.state).where(Slot.id == slot_id)
        ).first()
        if row is None or row.state != RecordState.ACTIVE.value:
            return MarkResult.NOT_FOUND
        return MarkResult.ALREADY_BOOKED

    def mark_slot_available(self, slot_id):
        self.session.execute(
            update(Slot)
            .where(Slot.id == slot_id)
            .values(is_booked=False, booked_by=None)
            .execution_options(synchronize_session=False)
        )
        self._expire_cached(Slot, slot_id)

    def retire_unbooked_slot(self, slot_id) -> bool:
        """Soft-delete a slot only while nobody holds it."""
        result = self.session.execute(
            update(Slot)
            .where(
                Slot.id == slot_id,
                Slot.state == RecordState.ACTIVE.value,
                Slot.is_booked.is_(False),
            )
            .values(state=RecordState.DELETED.value, state_changed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        self._expire_cached(Slot, slot_id)
        return result.rowcount == 1

    def query_slots(self, therapist_id, start_date=None, end_date=None, is_booked=None, not_before=None):
        stmt = select(Slot).where(
            Slot.therapist_id == therapist_id,
            Slot.state == RecordState.ACTIVE.value,
        )
        if start_date is not None:
            stmt = stmt.where(Slot.date >= start_date)
        if end_date is not None:
            stmt = stmt.where(Slot.date <= end_date)
        if not_before is not None:
            stmt = stmt.where(Slot.date >= not_before)
        if is_booked is not None:
            stmt = stmt.where(Slot.is_booked.is_(bool(is_booked)))
        stmt = stmt.order_by(Slot.date.asc(), Slot.start_time.asc(), Slot.id.asc())
        return list(self.session.scalars(stmt))

    # ---------- bookings ----------
    def find_booking(self, booking_id):
        return self.session.get(Booking, booking_id)

    def find_booking_by_ref(self, booking_ref):
        return self.session.scalars(
            select(Booking).where(Booking.booking_ref == booking_ref)
        ).first()

    def insert_booking(self, booking):
        # flush so unique-index violations surface inside the caller's transaction
        self.session.add(booking)
        self.session.flush()
        return booking

    def conditional_cancel(self, booking_id, reason, cancelled_by) -> bool:
        """Flip a booking to cancelled only if it is not cancelled already."""
        result = self.session.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status != BookingStatus.CANCELLED.value,
            )
            .values(
                status=BookingStatus.CANCELLED.value,
                cancellation_reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        self._expire_cached(Booking, booking_id)
        return True

    def update_booking(self, booking_id, **values) -> bool:
        """Patch a booking that has not been cancelled. False if no such row was written."""
        result = self.session.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status != BookingStatus.CANCELLED.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        self._expire_cached(Booking, booking_id)
        return True

    def booking_status(self, booking_id):
        """Stored status straight from the table, or None if there is no such booking."""
        return self.session.execute(
            select(Booking.status).where(Booking.id == booking_id)
        ).scalar_one_or_none()

    def slot_snapshot(self, slot_id):
        """Current therapist/date/times of a slot, read from the table."""
        return self.session.execute(
            select(Slot.therapist_id, Slot.date, Slot.start_time, Slot.end_time)
            .where(Slot.id == slot_id)
        ).one()

    def query_bookings(self, patient_id=None, therapist_id=None, status=None, start_date=None, end_date=None):
        stmt = select(Booking)
        if patient_id is not None:
            stmt = stmt.where(Booking.patient_id == patient_id)
        if therapist_id is not None:
            stmt = stmt.where(Booking.therapist_id == therapist_id)
        if status is not None:
            stmt = stmt.where(Booking.status == status)
        if start_date is not None:
            stmt = stmt.where(Booking.session_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(Booking.session_date <= end_date)
        stmt = stmt.order_by(
            Booking.session_date.asc(),
            Booking.session_start_time.asc(),
            Booking.id.asc(),
        )
        return list(self.session.scalars(stmt).unique())

    def _expire_cached(self, model, pk):
        # bulk UPDATEs bypass the identity map; drop any stale copy
        obj = self.session.identity_map.get(self.session.identity_key(model, pk))
        if obj is not None:
            self.session.expire(obj)
