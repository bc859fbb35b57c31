import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as therapyslot.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "therapyslot.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Audit trail of booking/slot/template events (audit_logs table)
    AUDIT_LOG_ENABLED = os.getenv("AUDIT_LOG_ENABLED", "true").lower() == "true"

    # Longest date range one generate request may expand
    MAX_GENERATION_DAYS = int(os.getenv("MAX_GENERATION_DAYS", "366"))

    # Human-readable booking reference, e.g. BK20260120180000X7Q2A
    BOOKING_REF_PREFIX = os.getenv("BOOKING_REF_PREFIX", "BK")

    # Basic app settings
    DEBUG = False
