class SchedulingError(Exception):
    """Base class for errors the scheduling core reports to its caller."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(SchedulingError):
    """Referenced template, slot or booking does not exist."""

    status_code = 404


class Conflict(SchedulingError):
    """Current stored state forbids the operation (already booked, already cancelled, duplicate)."""

    status_code = 409


class ValidationError(SchedulingError):
    """Malformed time or date, out-of-bounds duration, unknown status or day name."""

    status_code = 400
