import pytest

from app.core.config import settings
from app.db import mongo
from app.services.twilio_service import twilio_service
from fakes import FakeDatabase, RecordingTwilio

TEST_SECRET = "test-onboarding-secret-with-enough-length-for-hs256"

CHANNEL = "+5500000000000"

# Arbitrary fixed clock (epoch ms) for deterministic expiry tests
T0 = 1_700_000_000_123


@pytest.fixture(autouse=True)
def onboarding_secret(monkeypatch):
    monkeypatch.setattr(settings, "ONBOARDING_TOKEN_SECRET", TEST_SECRET)
    return TEST_SECRET


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeDatabase()
    monkeypatch.setattr(mongo, "_database", db)
    return db


@pytest.fixture
def outbox(monkeypatch):
    recorder = RecordingTwilio()
    monkeypatch.setattr(twilio_service, "send_message", recorder.send_message)
    return recorder


@pytest.fixture
def client(fake_db, outbox):
    from fastapi.testclient import TestClient
    from app.main import app

    return TestClient(app)
