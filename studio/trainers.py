"""Trainer reference validation.

A trainer reference is accepted only when it is a well-formed store key and
resolves to an identity whose role is exactly ``trainer``. The format check
runs first so malformed input never reaches the store.
"""

from __future__ import annotations

from typing import Any

from .errors import NotFoundError, ValidationError
from .ident import is_valid_key
from .user_repo import UserRepo


class InvalidKeyFormat(ValidationError):
    code = "invalid_key_format"

    def __init__(self, detail: str = "Invalid trainer ID. Please select a valid trainer.", **extra: Any):
        super().__init__(detail, **extra)


class TrainerNotFound(NotFoundError):
    status = 400  # booking contract; the trainer listing raises with 404
    code = "trainer_not_found"

    def __init__(self, detail: str = "Trainer not found. Please select a valid trainer.", **extra: Any):
        super().__init__(detail, **extra)


class TrainerReferenceValidator:
    def __init__(self, users: UserRepo | None = None):
        self.users = users or UserRepo()

    def validate(self, candidate: object) -> dict[str, Any]:
        if not is_valid_key(candidate):
            raise InvalidKeyFormat()
        user = self.users.find_by_id(str(candidate))
        if user is None or user.get("role") != "trainer":
            raise TrainerNotFound()
        return user


__all__ = ["InvalidKeyFormat", "TrainerNotFound", "TrainerReferenceValidator"]
