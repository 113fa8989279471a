from __future__ import annotations

import re
import uuid

# Store keys are UUID4 hex strings
KEY_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_key() -> str:
    return uuid.uuid4().hex


def is_valid_key(candidate: object) -> bool:
    """True when ``candidate`` is syntactically a store key.

    Purely a format check; it says nothing about whether a record exists.
    """
    return isinstance(candidate, str) and bool(KEY_PATTERN.match(candidate))


def canonicalize_email(email: str | None) -> str:
    """Return a canonical email for storage and lookup.

    Rules:
    - strip surrounding whitespace
    - lowercase
    - punycode-encode the domain via IDNA
    """
    if not email:
        return ""
    s = str(email).strip().lower()
    if "@" not in s:
        return s
    local, domain = s.split("@", 1)
    try:
        domain_ascii = domain.encode("idna").decode("ascii")
    except UnicodeError:
        domain_ascii = domain
    return f"{local}@{domain_ascii}"


__all__ = ["KEY_PATTERN", "new_key", "is_valid_key", "canonicalize_email"]
