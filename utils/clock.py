from datetime import date, datetime, timezone


def utcnow() -> datetime:
    # naive UTC, matching how DateTime columns are stored
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    # slot dates are local wall-clock calendar dates
    return date.today()
