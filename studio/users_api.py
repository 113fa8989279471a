from __future__ import annotations

from flask import Blueprint, jsonify

from .user_repo import UserRepo

bp = Blueprint("users_api", __name__, url_prefix="/api")

_users = UserRepo()


@bp.get("/users")
def list_users():
    # Public view only: list_users never carries password hashes
    return jsonify(_users.list_users())


@bp.get("/trainers")
def list_trainers():
    return jsonify(_users.list_trainers())
