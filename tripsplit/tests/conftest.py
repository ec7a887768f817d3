"""
Shared fixtures: an in-memory database wired into the FastAPI app.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tripsplit.models  # noqa: F401
from tripsplit.db.base import Base
from tripsplit.db.session import get_db
from tripsplit.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def event_with_people(client):
    """An EUR event with participants A, B and C."""
    response = client.post("/api/events", json={"name": "Lisbon trip", "ledger_currency": "eur"})
    assert response.status_code == 201
    event_id = response.json()["id"]

    people = {}
    for first_name in ("A", "B", "C"):
        response = client.post(
            f"/api/events/{event_id}/participants",
            json={"first_name": first_name, "last_name": "Traveler"}
        )
        assert response.status_code == 201
        people[first_name] = response.json()["id"]

    return event_id, people
