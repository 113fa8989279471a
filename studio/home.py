from __future__ import annotations

from flask import Blueprint, current_app, send_from_directory

from .app_authz import login_required
from .pages import PAGES

bp = Blueprint("home", __name__)


@bp.get("/")
def index():
    return send_from_directory(current_app.static_folder, PAGES["login"])


@bp.get("/admin_dashboard")
@login_required
def admin_dashboard():
    # Same single "logged in" predicate as every other gated page
    return send_from_directory(current_app.static_folder, PAGES["admin_dashboard"])
