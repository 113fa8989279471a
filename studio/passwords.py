"""Salted one-way password hashing on top of werkzeug.security.

Digests have the werkzeug form ``method$salt$hash``; a fresh salt is drawn on
every call so two hashes of the same password differ.
"""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt"
SALT_LENGTH = 16


class MalformedDigest(ValueError):
    """The stored digest is not a werkzeug ``method$salt$hash`` string."""


def hash_password(password: str, method: str = DEFAULT_METHOD) -> str:
    if not isinstance(password, str):
        raise TypeError("Password must be a string.")
    return generate_password_hash(password, method=method, salt_length=SALT_LENGTH)


def _split(digest: object) -> tuple[str, str, str]:
    if not isinstance(digest, str) or digest.count("$") < 2:
        raise MalformedDigest("digest must look like method$salt$hash")
    method, salt, hashval = digest.split("$", 2)
    if not method or not salt or not hashval:
        raise MalformedDigest("digest has an empty component")
    try:
        int(hashval, 16)
    except ValueError:
        raise MalformedDigest("digest hash is not hex encoded") from None
    return method, salt, hashval


def verify_password(password: str, digest: str) -> bool:
    """Return True when ``password`` matches ``digest``; False on mismatch."""
    _split(digest)
    if not isinstance(password, str):
        return False
    try:
        return check_password_hash(digest, password)
    except ValueError as e:  # unknown hash method name
        raise MalformedDigest(str(e)) from e


__all__ = ["DEFAULT_METHOD", "MalformedDigest", "hash_password", "verify_password"]
