from datetime import date

import pytest

from app import create_app
from config import Config
from models import db
from scheduling import templates as template_service

# 2024-01-01 is a Monday
MONDAY = date(2024, 1, 1)


class TestingConfig(Config):
    __test__ = False

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_template(app):
    def _make(**overrides):
        fields = {
            "therapist_id": "therapist-1",
            "day_of_week": "monday",
            "start_time": "09:00",
            "end_time": "12:00",
            "session_duration": 50,
            "break_time": 10,
        }
        fields.update(overrides)
        return template_service.create_template(**fields)

    return _make
