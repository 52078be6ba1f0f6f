import os

# Configuration is read at import time, so it must be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["RESEND_API_KEY"] = ""
os.environ["FRONTEND_URL"] = "https://catering.example.com"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from catering.auth import AuthenticatedUser, get_current_user  # noqa: E402
from catering.database import Base, get_db  # noqa: E402
from catering.main import app  # noqa: E402

EVENT_DATE = "2099-06-06"  # a Saturday


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(
        id="user-1", email="owner@example.com", role="owner"
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload():
    return {
        "eventType": "private-dinner",
        "eventDate": EVENT_DATE,
        "eventTime": "6:00 PM",
        "customerName": "Dana Reyes",
        "customerEmail": "dana@example.com",
        "adults": 15,
        "children": 0,
        "location": "12 Harbor Rd",
        "distanceMiles": 10,
    }


@pytest.fixture
def create_booking(client, booking_payload):
    def _create(**overrides):
        response = client.post("/bookings", json={**booking_payload, **overrides})
        assert response.status_code == 200, response.text
        return response.json()

    return _create
