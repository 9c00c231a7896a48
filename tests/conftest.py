import os

# Must be set before the app modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient

from create_admin import create_admin
from db import SessionLocal, engine
from main import app
from models import Base

ADMIN_EMAIL = "admin@company.com"
ADMIN_PASSWORD = "Admin#12345"


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def login_headers(client, email, password):
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def register(client, email, password="Pwd#12345", first_name="Mod", last_name="Erator"):
    r = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "first_name": first_name,
        "last_name": last_name,
    })
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def moderator_headers(client):
    register(client, "mod@company.com")
    return login_headers(client, "mod@company.com", "Pwd#12345")


@pytest.fixture
def admin_headers(client, db):
    create_admin(db, ADMIN_EMAIL, ADMIN_PASSWORD)
    return login_headers(client, ADMIN_EMAIL, ADMIN_PASSWORD)
