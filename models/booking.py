from sqlalchemy import text
from utils.clock import utcnow
from models.db import db
from models.enums import BookingStatus

class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)
    booking_ref = db.Column(db.String(32), nullable=False, unique=True, index=True)

    patient_id = db.Column(db.String(64), nullable=False, index=True)
    therapist_id = db.Column(db.String(64), nullable=False, index=True)
    slot_id = db.Column(db.Integer, db.ForeignKey("slots.id"), nullable=False, index=True)

    # snapshot of the slot at booking time; later slot edits do not touch these
    session_date = db.Column(db.Date, nullable=False, index=True)
    session_start_time = db.Column(db.String(5), nullable=False)
    session_end_time = db.Column(db.String(5), nullable=False)

    status = db.Column(db.String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True)
    notes = db.Column(db.Text, nullable=False, default="")

    cancellation_reason = db.Column(db.String(255), nullable=True)
    cancelled_by = db.Column(db.String(64), nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    slot = db.relationship("Slot", lazy="joined")

    __table_args__ = (
        # Hard business-rule: one non-cancelled booking per slot (prevents double booking)
        db.Index(
            "uq_booking_active_slot",
            "slot_id",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )
