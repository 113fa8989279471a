"""Authorization gate.

A single predicate: the request carries a session cookie whose token maps to
a live session. Roles are not consulted here.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar, cast

from flask import current_app, g, redirect

from .app_sessions import IdentitySnapshot, SessionManager
from .cookies import read_session_token
from .errors import SessionError
from .pages import page_url

P = ParamSpec("P")
R = TypeVar("R")


def session_manager() -> SessionManager:
    return cast(SessionManager, current_app.session_manager)  # type: ignore[attr-defined]


def current_identity() -> IdentitySnapshot | None:
    """Snapshot for this request's session cookie, resolved once per request."""
    if "identity" not in g:
        g.identity = session_manager().current_user(read_session_token())
    return g.identity


def require_session() -> IdentitySnapshot:
    ident = current_identity()
    if ident is None:
        raise SessionError()
    return ident


def login_required(fn: Callable[P, R]) -> Callable[P, R]:
    """Page-route variant: redirect to the login page instead of a 401 body."""

    @wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[no-untyped-def]
        if current_identity() is None:
            return redirect(page_url("login"))
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


__all__ = ["session_manager", "current_identity", "require_session", "login_required"]
