import os
import tempfile

# Settings are read at import time, so configure before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_PREFIX"] = ""
os.environ["API_LOG_PATH"] = os.path.join(tempfile.gettempdir(), "travelbuddy-tests", "api.log")

import pytest
from fastapi.testclient import TestClient

from database import Base, engine, SessionLocal
from main import app


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(client):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def register(client, username, password="secret1"):
    resp = client.post("/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
    })
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return {
        "token": body["token"],
        "user": body["user"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def alice(client):
    return register(client, "alice")


@pytest.fixture
def bob(client):
    return register(client, "bob")


def trip_payload(**overrides):
    payload = {
        "title": "Kyoto in autumn",
        "description": "Temples, food and long walks.",
        "location": {"country": "Japan", "city": "Kyoto"},
        "duration": {"days": 5},
        "costs": {
            "transport": 300,
            "accommodation": 500,
            "food": 150,
            "activities": 40,
            "other": 10,
            "currency": "JPY",
        },
        "tips": ["Buy a bus day pass"],
        "mistakes": ["Visiting Fushimi Inari at noon"],
        "images": [{"url": "https://img.example.com/kyoto.jpg", "caption": "Kiyomizu-dera"}],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_trip(client):
    def _make(owner, **overrides):
        resp = client.post("/trips", json=trip_payload(**overrides), headers=owner["headers"])
        assert resp.status_code == 201, resp.text
        return resp.json()["trip"]
    return _make
