import enum


class DayOfWeek(str, enum.Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        # date.weekday(): Monday == 0
        return list(cls)[weekday]


class RecordState(str, enum.Enum):
    """Lifecycle of templates and slots (replaces a bare is_active flag)."""

    ACTIVE = "active"
    DELETED = "deleted"


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"


# statuses reachable through update_status; cancellation has its own operation
SETTABLE_STATUSES = {BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW}
