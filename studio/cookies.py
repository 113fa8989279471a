from __future__ import annotations

from flask import Response, current_app, request


def session_cookie_name() -> str:
    return current_app.config.get("SESSION_COOKIE_NAME_STUDIO", "studio_sid")


def read_session_token() -> str | None:
    return request.cookies.get(session_cookie_name()) or None


def set_session_cookie(resp: Response, token: str, *, max_age: int | None = None) -> None:
    """Attach the session token cookie with security-oriented defaults.

    HttpOnly always; Secure only when COOKIE_SECURE is set (production).
    """
    resp.set_cookie(
        session_cookie_name(),
        token,
        secure=bool(current_app.config.get("COOKIE_SECURE")),
        httponly=True,
        samesite="Lax",
        max_age=max_age,
        path="/",
    )


def clear_session_cookie(resp: Response) -> None:
    resp.delete_cookie(session_cookie_name(), path="/")


__all__ = ["session_cookie_name", "read_session_token", "set_session_cookie", "clear_session_cookie"]
