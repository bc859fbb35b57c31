from .health import health_bp
from .templates import templates_bp
from .timeslots import timeslots_bp
from .bookings import bookings_bp
