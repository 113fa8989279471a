"""Role adapter.

CanonicalRole: roles stored on identities
LegacyRole: labels older front-end forms still submit
RoleLike: union accepted at API boundary; converted via to_canonical()
"""

from __future__ import annotations

from typing import Literal, cast

CanonicalRole = Literal["member", "trainer", "admin"]
LegacyRole = Literal["user", "administrator"]
RoleLike = CanonicalRole | LegacyRole

CANONICAL_ROLES: tuple[CanonicalRole, ...] = ("member", "trainer", "admin")

ROLE_MAP: dict[LegacyRole, CanonicalRole] = {
    "user": "member",
    "administrator": "admin",
}


def to_canonical(role: str | None) -> CanonicalRole | None:
    """Map a submitted role label to its canonical form; None when unknown."""
    value = (role or "").strip().lower()
    if value in ROLE_MAP:
        return ROLE_MAP[cast(LegacyRole, value)]
    if value in CANONICAL_ROLES:
        return cast(CanonicalRole, value)
    return None


__all__ = [
    "CanonicalRole",
    "LegacyRole",
    "RoleLike",
    "CANONICAL_ROLES",
    "ROLE_MAP",
    "to_canonical",
]
