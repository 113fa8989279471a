"""Credential store: persistence of user identities."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .db import get_session
from .errors import ConflictError, StorageFault
from .ident import canonicalize_email, is_valid_key
from .models import User

log = logging.getLogger("studio.users")


def _to_dict(user: User, *, include_hash: bool = True) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "name": user.name,
        "role": user.role,
    }
    if include_hash:
        out["password_hash"] = user.password_hash
    return out


class UserRepo:
    """Repository for identity records.

    Lookups return plain dicts (including ``password_hash``) or None.
    Uniqueness of email and username is enforced by the table's unique
    constraints; ``create`` maps a violation to ConflictError.
    """

    def create(self, *, email: str, username: str, name: str | None, password_hash: str, role: str) -> dict[str, Any]:
        db = get_session()
        try:
            user = User(
                email=canonicalize_email(email),
                username=username.strip(),
                name=name,
                password_hash=password_hash,
                role=role,
            )
            db.add(user)
            db.commit()
            return _to_dict(user)
        except IntegrityError:
            db.rollback()
            log.info("signup rejected by unique constraint username=%s", username)
            raise ConflictError("Email or username already registered! Try another.") from None
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageFault(f"user insert failed: {e}") from e
        finally:
            db.close()

    def _find_one(self, *criteria) -> Optional[dict[str, Any]]:
        db = get_session()
        try:
            user = db.execute(select(User).where(*criteria)).scalar_one_or_none()
            return _to_dict(user) if user else None
        except SQLAlchemyError as e:
            raise StorageFault(f"user lookup failed: {e}") from e
        finally:
            db.close()

    def find_by_email(self, email: str) -> Optional[dict[str, Any]]:
        email = canonicalize_email(email)
        if not email:
            return None
        return self._find_one(User.email == email)

    def find_by_username(self, username: str) -> Optional[dict[str, Any]]:
        username = (username or "").strip()
        if not username:
            return None
        return self._find_one(User.username == username)

    def find_by_id(self, user_id: str) -> Optional[dict[str, Any]]:
        if not is_valid_key(user_id):
            return None
        return self._find_one(User.id == user_id)

    def list_users(self) -> list[dict[str, Any]]:
        """Public view of every user; password hashes are never included."""
        db = get_session()
        try:
            rows = db.execute(select(User).order_by(User.username)).scalars().all()
            return [_to_dict(u, include_hash=False) for u in rows]
        except SQLAlchemyError as e:
            raise StorageFault(f"user listing failed: {e}") from e
        finally:
            db.close()

    def list_trainers(self) -> list[dict[str, Any]]:
        db = get_session()
        try:
            rows = db.execute(
                select(User.id, User.name).where(User.role == "trainer").order_by(User.name)
            ).all()
            return [{"id": r[0], "name": r[1]} for r in rows]
        except SQLAlchemyError as e:
            raise StorageFault(f"trainer listing failed: {e}") from e
        finally:
            db.close()


__all__ = ["UserRepo"]
