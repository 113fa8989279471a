"""Server-side login sessions.

A session row maps an opaque token to a point-in-time snapshot of the
identity taken at login. The snapshot carries only the claims handlers need
(key, username, email, display name, role); the password hash never leaves
the credential store.
"""
from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any, TypedDict, cast

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from .db import get_session
from .errors import StorageFault
from .models import AuthSession

log = logging.getLogger("studio.sessions")

DEFAULT_TTL_SECONDS = 86400


class IdentitySnapshot(TypedDict):
    user_id: str
    username: str
    email: str
    name: str | None
    role: str


def snapshot_of(user: dict[str, Any]) -> IdentitySnapshot:
    """Project a stored identity onto the safe session view."""
    return {
        "user_id": str(user["id"]),
        "username": user["username"],
        "email": user["email"],
        "name": user.get("name"),
        "role": user["role"],
    }


def _aware(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=UTC)


class SessionManager:
    """Owns the session table for the lifetime of the application."""

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.ttl = timedelta(seconds=int(ttl_seconds))

    def login(self, user: dict[str, Any]) -> str:
        token = secrets.token_urlsafe(32)
        now = datetime.now(UTC)
        snap = snapshot_of(user)
        db = get_session()
        try:
            db.add(
                AuthSession(
                    token=token,
                    user_id=snap["user_id"],
                    snapshot=dict(snap),
                    created_at=now,
                    expires_at=now + self.ttl,
                )
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageFault(f"session insert failed: {e}") from e
        finally:
            db.close()
        self.purge_expired()
        return token

    def current_user(self, token: str | None) -> IdentitySnapshot | None:
        if not token:
            return None
        db = get_session()
        try:
            row = db.execute(select(AuthSession).where(AuthSession.token == token)).scalar_one_or_none()
            if row is None:
                return None
            if _aware(row.expires_at) <= datetime.now(UTC):
                db.delete(row)
                db.commit()
                log.info("session expired user_id=%s", row.user_id)
                return None
            return cast(IdentitySnapshot, dict(row.snapshot))
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageFault(f"session lookup failed: {e}") from e
        finally:
            db.close()

    def logout(self, token: str | None) -> bool:
        """Destroy the session; False when there was nothing to destroy."""
        if not token:
            return False
        db = get_session()
        try:
            result = db.execute(delete(AuthSession).where(AuthSession.token == token))
            db.commit()
            return bool(result.rowcount)
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageFault(f"Could not log out, please try again ({e})") from e
        finally:
            db.close()

    def purge_expired(self) -> int:
        db = get_session()
        try:
            result = db.execute(delete(AuthSession).where(AuthSession.expires_at <= datetime.now(UTC)))
            db.commit()
            if result.rowcount:
                log.info("purged %d expired sessions", result.rowcount)
            return int(result.rowcount or 0)
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageFault(f"session purge failed: {e}") from e
        finally:
            db.close()


__all__ = ["IdentitySnapshot", "SessionManager", "snapshot_of", "DEFAULT_TTL_SECONDS"]
