from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from guardtime.core.security import hash_password, hash_token
from guardtime.db.session import Base, get_session
from guardtime.main import app
from guardtime.models import User, UserSession

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def _headers_for(role: str) -> dict[str, str]:
    db = TestingSessionLocal()
    try:
        user = User(email=f"{role}@example.com", hashed_password=hash_password("correct-horse"), role=role)
        db.add(user)
        db.flush()
        token = f"{role}-token"
        db.add(
            UserSession(
                user_id=user.id,
                token_hash=hash_token(token),
                expires_at=datetime.utcnow() + timedelta(hours=1),
            )
        )
        db.commit()
    finally:
        db.close()
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return _headers_for("admin")


@pytest.fixture
def timekeeper_headers():
    return _headers_for("timekeeper")


@pytest.fixture
def payroll_headers():
    return _headers_for("payroll")


@pytest.fixture
def viewer_headers():
    return _headers_for("viewer")


class TimekeepingApi:
    """Builds a timesheet hierarchy through the HTTP surface."""

    def __init__(self, client: TestClient, headers: dict[str, str]):
        self.client = client
        self.headers = headers

    def _post(self, path: str, payload: dict) -> dict:
        response = self.client.post(path, json=payload, headers=self.headers)
        assert response.status_code == 201, response.text
        return response.json()

    def timesheet(self, employee_name: str = "Juan Dela Cruz", shift: str = "Day Shift") -> dict:
        payload = {
            "employeeName": employee_name,
            "payPeriod": "2025-01-A",
            "detachment": "Makati Main Gate",
            "shift": shift,
        }
        return self._post("/timesheets/create", payload)["timesheet"]

    def dtr(self, timesheet_id: int, date: str = "2025-01-02", **hours) -> dict:
        return self._post("/dtrs/create", {"timesheetId": timesheet_id, "date": date, **hours})

    def timelog(self, dtr_id: int, mode: str, timestamp: str, with_clock_event: bool = False) -> dict:
        payload = {"dtrId": dtr_id, "mode": mode, "timestamp": timestamp, "withClockEvent": with_clock_event}
        return self._post("/timelogs/create", payload)

    def clock_event(self, timelog_id: int, clock_time: str) -> dict:
        return self._post("/clockevents/create", {"timelogId": timelog_id, "clockTime": clock_time})

    def shift(self, timesheet_id: int, date: str, time_in: str, time_out: str) -> dict:
        """A DTR with an in/out pair; returns the cascade of the ``out`` timelog."""
        dtr = self.dtr(timesheet_id, date)["dtr"]
        self.timelog(dtr["id"], "in", time_in)
        return self.timelog(dtr["id"], "out", time_out)

    def get(self, path: str) -> dict:
        response = self.client.get(path, headers=self.headers)
        assert response.status_code == 200, response.text
        return response.json()


@pytest.fixture
def api(client, timekeeper_headers):
    return TimekeepingApi(client, timekeeper_headers)


@pytest.fixture
def session_factory():
    return TestingSessionLocal
