from sqlalchemy import text
from utils.clock import utcnow
from models.db import db
from models.enums import RecordState

class Slot(db.Model):
    __tablename__ = "slots"

    id = db.Column(db.Integer, primary_key=True)

    therapist_id = db.Column(db.String(64), nullable=False, index=True)
    template_id = db.Column(db.Integer, db.ForeignKey("availability_templates.id"), nullable=True, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.String(5), nullable=False)
    end_time = db.Column(db.String(5), nullable=False)

    # toggled only through the conditional updates in scheduling.store
    is_booked = db.Column(db.Boolean, default=False, nullable=False)
    booked_by = db.Column(db.String(64), nullable=True)

    state = db.Column(db.String(20), nullable=False, default=RecordState.ACTIVE.value)
    state_changed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        # Prevent duplicate active slots for the same therapist/date/start
        db.Index(
            "uq_slot_therapist_date_start_active",
            "therapist_id", "date", "start_time",
            unique=True,
            sqlite_where=text("state = 'active'"),
            postgresql_where=text("state = 'active'"),
        ),
        db.Index("ix_slots_date_is_booked", "date", "is_booked"),
    )

    @property
    def is_active(self):
        return self.state == RecordState.ACTIVE.value
