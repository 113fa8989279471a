from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, make_response, redirect

from .app_authz import require_session, session_manager
from .cookies import clear_session_cookie, read_session_token, set_session_cookie
from .errors import AuthenticationError, ConflictError, StorageFault, ValidationError, make_error
from .pages import dashboard_url
from .passwords import MalformedDigest, hash_password, verify_password
from .request_data import payload, text
from .roles import CANONICAL_ROLES, to_canonical
from .user_repo import UserRepo

log = logging.getLogger("studio.auth")

bp = Blueprint("auth", __name__)

_users = UserRepo()


@bp.post("/signup")
def signup():
    data = payload()
    email = text(data, "email")
    username = text(data, "username")
    name = text(data, "name") or None
    password = data.get("password") or ""
    if not email or not username or not password:
        raise ValidationError("Email, username and password are required.")
    role = to_canonical(text(data, "role"))
    if role is None:
        raise ValidationError(f"Role must be one of: {', '.join(CANONICAL_ROLES)}.")
    # Friendly pre-flight; the unique constraints decide concurrent races
    if _users.find_by_email(email):
        raise ConflictError("Email already registered! Try another.")
    if _users.find_by_username(username):
        raise ConflictError("Username already taken! Try another.")
    pw_hash = hash_password(str(password), method=current_app.config.get("PASSWORD_HASH_METHOD", "scrypt"))
    user = _users.create(email=email, username=username, name=name, password_hash=pw_hash, role=role)
    log.info("signup user_id=%s role=%s", user["id"], role)
    return redirect("/")


@bp.post("/login")
def login():
    data = payload()
    username = text(data, "username")
    password = data.get("password") or ""
    if not username or not password:
        raise ValidationError("Username and password are required.")
    user = _users.find_by_username(username)
    if user is None:
        raise AuthenticationError()
    try:
        ok = verify_password(str(password), user["password_hash"])
    except MalformedDigest:
        log.error("stored password digest unreadable user_id=%s", user["id"])
        ok = False
    if not ok:
        log.info("login failed user_id=%s", user["id"])
        raise AuthenticationError()

    manager = session_manager()
    previous = read_session_token()
    if previous:
        manager.logout(previous)
    token = manager.login(user)
    role = user["role"]
    resp = make_response(
        jsonify(
            {
                "role": role,
                "redirect": dashboard_url(role),
                "trainerId": user["id"] if role == "trainer" else None,
            }
        )
    )
    set_session_cookie(resp, token, max_age=int(manager.ttl.total_seconds()))
    log.info("login user_id=%s role=%s", user["id"], role)
    return resp


@bp.post("/logout")
def logout():
    token = read_session_token()
    try:
        destroyed = session_manager().logout(token)
    except StorageFault as e:
        log.error("logout failed: %s", e.detail)
        return make_error("Could not log out, please try again", e.code, 500)
    message = "Logged out successfully" if destroyed else "No active session"
    resp = make_response(jsonify({"success": True, "message": message}))
    clear_session_cookie(resp)
    return resp


@bp.get("/me")
def me():
    ident = require_session()
    return jsonify({"ok": True, **ident})


__all__ = ["bp"]
