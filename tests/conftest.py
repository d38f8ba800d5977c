"""
Shared pytest fixtures: an in-memory MongoDB, a recording mail relay and an API client.
"""
import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from config.database import Database
from main import app
from schemas.appointment import AppointmentCreate
from services.session_service import SessionManager


class RecordingMailer:
    """Stands in for EmailService and keeps every e-mail it is asked to send."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent = []

    async def send_email(self, to_address: str, subject: str, html: str) -> bool:
        self.sent.append({"to": to_address, "subject": subject, "html": html})
        return self.succeed


@pytest.fixture(autouse=True)
def mock_database():
    """Point the Database class at a fresh in-memory client for every test."""
    client = AsyncMongoMockClient()
    Database.client = client
    Database.db = client["test_nuvo"]
    yield Database()
    Database.client = None
    Database.db = None


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def failing_mailer():
    return RecordingMailer(succeed=False)


@pytest.fixture
def session_manager():
    manager = SessionManager()
    yield manager
    if not manager.disposed:
        manager.dispose()


@pytest.fixture
def client(session_manager):
    app.state.session_manager = session_manager
    return TestClient(app)


@pytest.fixture
def appointment_payload():
    return {
        "name": "Ana",
        "email": "a@x.com",
        "phone": "+54 11 5555 0000",
        "date": "2025-06-01",
        "time": "10:00",
        "service": "cata-intima",
        "participants": 1,
        "notes": ""
    }


@pytest.fixture
def appointment_draft(appointment_payload):
    return AppointmentCreate(**appointment_payload)
