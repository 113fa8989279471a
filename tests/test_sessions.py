from datetime import UTC, datetime, timedelta

import pytest

from studio.app_sessions import SessionManager, snapshot_of
from studio.db import get_session
from studio.models import AuthSession
from studio.user_repo import UserRepo


@pytest.fixture
def user(app):
    return UserRepo().create(
        email="s@example.com", username="sam", name="Sam", password_hash="pbkdf2:sha256:1$s$ab", role="trainer"
    )


def test_snapshot_drops_password_hash(user):
    snap = snapshot_of(user)
    assert "password_hash" not in snap
    assert snap == {"user_id": user["id"], "username": "sam", "email": "s@example.com", "name": "Sam", "role": "trainer"}


def test_login_then_current_user_then_logout(user):
    mgr = SessionManager(ttl_seconds=3600)
    token = mgr.login(user)
    assert token
    snap = mgr.current_user(token)
    assert snap["user_id"] == user["id"]
    assert snap["role"] == "trainer"
    assert "password_hash" not in snap
    assert mgr.logout(token) is True
    assert mgr.current_user(token) is None
    # Already gone: reported distinctly, not as an error
    assert mgr.logout(token) is False


def test_unknown_or_missing_token_is_anonymous(app):
    mgr = SessionManager()
    assert mgr.current_user(None) is None
    assert mgr.current_user("nope") is None
    assert mgr.logout(None) is False


def test_tokens_are_independent(user):
    mgr = SessionManager()
    t1, t2 = mgr.login(user), mgr.login(user)
    assert t1 != t2
    mgr.logout(t1)
    assert mgr.current_user(t1) is None
    assert mgr.current_user(t2)["user_id"] == user["id"]


def test_snapshot_is_point_in_time(user):
    mgr = SessionManager()
    token = mgr.login(user)
    user["name"] = "Renamed"
    assert mgr.current_user(token)["name"] == "Sam"


def _expire(token):
    db = get_session()
    try:
        row = db.get(AuthSession, token)
        row.expires_at = datetime.now(UTC) - timedelta(seconds=1)
        db.commit()
    finally:
        db.close()


def _row(token):
    db = get_session()
    try:
        return db.get(AuthSession, token)
    finally:
        db.close()


def test_expired_session_is_anonymous_and_deleted_on_read(user):
    mgr = SessionManager(ttl_seconds=3600)
    token = mgr.login(user)
    _expire(token)
    assert _row(token) is not None
    assert mgr.current_user(token) is None
    assert _row(token) is None


def test_purge_removes_only_expired_rows(user):
    mgr = SessionManager(ttl_seconds=3600)
    stale, live = mgr.login(user), mgr.login(user)
    _expire(stale)
    assert mgr.purge_expired() == 1
    assert _row(stale) is None
    assert mgr.current_user(live)["user_id"] == user["id"]
