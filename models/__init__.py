from .db import db
from .enums import DayOfWeek, RecordState, BookingStatus
from .audit_log import AuditLog
from .template import AvailabilityTemplate
from .slot import Slot
from .booking import Booking
