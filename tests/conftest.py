import os
import sys
import uuid

import pytest

# Path setup before any project imports to satisfy E402
ROOT = os.path.dirname(__file__)
PARENT = os.path.abspath(os.path.join(ROOT, ".."))
if PARENT not in sys.path:  # pragma: no cover - environment dependent
    sys.path.insert(0, PARENT)

# Cheap hashing keeps the suite fast; production uses scrypt
FAST_HASH = "pbkdf2:sha256:1000"


@pytest.fixture
def app(tmp_path):
    from studio.app_factory import create_app  # noqa: E402

    url = f"sqlite:///{tmp_path / 'test_studio.db'}"
    app = create_app(
        {
            "TESTING": True,
            "secret_key": "test",
            "database_url": url,
            "app_env": "test",
            "password_hash_method": FAST_HASH,
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def other_client(app):
    """A second browser: shares the database, not the cookies."""
    return app.test_client()


def unique(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def signup(client, username: str, role: str = "member", password: str = "pw1", email: str | None = None, name: str | None = None):
    return client.post(
        "/signup",
        json={
            "email": email or f"{username}@example.com",
            "username": username,
            "name": name or username.title(),
            "password": password,
            "role": role,
        },
    )


def login(client, username: str, password: str = "pw1"):
    return client.post("/login", json={"username": username, "password": password})


@pytest.fixture
def trainer(client):
    """A signed-up trainer; returns its store key and username."""
    username = unique("trainer")
    r = signup(client, username, role="trainer", name="Tara Trainer")
    assert r.status_code == 302, r.get_json()
    from studio.user_repo import UserRepo

    user = UserRepo().find_by_username(username)
    return {"id": user["id"], "username": username, "name": user["name"]}


def booking_form(trainer_id: str, **overrides):
    data = {
        "name": "Maya Member",
        "email": "maya@example.com",
        "trainerId": trainer_id,
        "gender": "female",
        "age": "29",
        "date": "2024-05-01",
        "time": "10:30",
        "appointmentType": "personal training",
        "appointmentPhone": "9876543210",
    }
    data.update(overrides)
    return data
