import os
import tempfile
import time

import jwt
import pytest

# Keep log files out of the source tree before the app module is imported
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="charging-log-logs-"))
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="charging-log-data-"))

from fastapi.testclient import TestClient

from config import settings
from main import app

TEST_SECRET = "test-secret-key-for-charging-log-tests"


@pytest.fixture
def valid_record():
    """Form values that pass every validation rule"""
    return {
        "batteryId": "BAT-001",
        "date": "2024-05-03",
        "customerName": "IFFCO",
        "customerNameOther": "",
        "zone": "North",
        "location": "Punjab",
        "chargeCurrentAmps": "5.5",
        "battVoltInitial": "44.1",
        "battVoltFinal": "50.4",
        "chargeTimeInitial": "09:00",
        "chargeTimeFinal": "10:30",
        "durationDisplay": "",
        "droneNumber": "DR-7",
        "uin": "UA123",
        "responsiblePerson": "R. Kumar",
        "temperatureStatus": "Normal",
        "deformation": "No",
        "otherNotes": "",
    }


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Fresh SQLite file per test"""
    path = str(tmp_path / "charging_log_test.db")
    monkeypatch.delenv("CHARGING_LOG_DB", raising=False)
    monkeypatch.setattr(settings, "SQLITE_DB_PATH", path)
    return path


@pytest.fixture
def jwt_secret(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", TEST_SECRET)
    return TEST_SECRET


@pytest.fixture
def make_token(jwt_secret):
    def _make(sub="operator1", role="user", sid=None, expires_in=3600):
        now = int(time.time())
        claims = {"sub": sub, "role": role, "iat": now, "exp": now + expires_in}
        if sid:
            claims["sid"] = sid
        return jwt.encode(claims, jwt_secret, algorithm=settings.JWT_ALGORITHM)
    return _make


@pytest.fixture
def operator_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token(sub='admin1', role='admin')}"}


@pytest.fixture
def client(db_path, jwt_secret):
    with TestClient(app) as test_client:
        yield test_client
