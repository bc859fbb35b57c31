from utils.clock import utcnow
from models.db import db
from models.enums import RecordState

class AvailabilityTemplate(db.Model):
    __tablename__ = "availability_templates"

    id = db.Column(db.Integer, primary_key=True)

    therapist_id = db.Column(db.String(64), nullable=False, index=True)
    day_of_week = db.Column(db.String(10), nullable=False)  # monday..sunday
    start_time = db.Column(db.String(5), nullable=False)    # "HH:MM"
    end_time = db.Column(db.String(5), nullable=False)
    session_duration = db.Column(db.Integer, nullable=False)  # minutes, 15-240
    break_time = db.Column(db.Integer, nullable=False, default=0)  # minutes, 0-60

    state = db.Column(db.String(20), nullable=False, default=RecordState.ACTIVE.value, index=True)
    state_changed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_active(self):
        return self.state == RecordState.ACTIVE.value
