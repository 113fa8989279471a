"""Flask application factory.

Provides:
 - App factory with configuration override
 - DB engine initialization with a fail-fast connectivity check
 - Session table lifecycle (``app.session_manager``)
 - Unified JSON error envelope
 - Request id + timing middleware with one structured log line per request
 - Blueprint registration (auth, appointments, payments, users, pages, health)
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Any

from dotenv import load_dotenv
from flask import Flask, g, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.wrappers.response import Response

from .app_sessions import SessionManager
from .appointments_api import bp as appointments_bp
from .auth import bp as auth_bp
from .config import Config
from .db import create_all, init_engine, ping, remove_session
from .errors import register_error_handlers
from .health_api import bp as health_bp
from .home import bp as home_bp
from .logging_setup import configure_logging
from .payments_api import bp as payments_bp
from .users_api import bp as users_bp


def create_app(config_override: dict[str, Any] | None = None) -> Flask:
    load_dotenv()
    cfg = Config.from_env()
    if config_override:
        known = {k: v for k, v in config_override.items() if hasattr(cfg, k)}
        if known:
            cfg.override(known)

    base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
    public_dir = cfg.public_dir or os.path.join(base_dir, "public")
    # Pages are served from the site root (/login.html, /asucces.html, ...)
    app = Flask(__name__, static_url_path="", static_folder=public_dir)

    app.config.update(cfg.to_flask_dict())
    if config_override:
        for k, v in config_override.items():  # also allow direct Flask config keys
            if k.isupper():
                app.config[k] = v

    log = configure_logging(cfg.log_level)

    # Resolve a stable absolute SQLite path when DATABASE_URL is left at the default
    if cfg.database_url == "sqlite:///studio.db":
        os.makedirs(app.instance_path, exist_ok=True)
        cfg.database_url = f"sqlite:///{os.path.join(app.instance_path, 'studio.db')}"
        app.config["SQLALCHEMY_DATABASE_URI"] = cfg.database_url

    # --- DB setup: an unreachable store at startup is fatal ---
    try:
        init_engine(cfg.database_url, force=True)
        ping()
        create_all()
    except SQLAlchemyError as e:
        log.critical("Database connection failed: %s", e)
        raise SystemExit(1) from e
    log.info("Database connected url=%s", cfg.database_url.split("@")[-1])

    app.session_manager = SessionManager(cfg.session_ttl_seconds)  # type: ignore[attr-defined]

    register_error_handlers(app)

    # --- Request id / timing middleware ---
    access_log = logging.getLogger("studio.access")

    @app.before_request
    def _before_req() -> None:
        g._t0 = time.perf_counter()
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())

    @app.after_request
    def _after_req(resp: Response) -> Response:
        dur_ms = int((time.perf_counter() - getattr(g, "_t0", time.perf_counter())) * 1000)
        rid = getattr(g, "request_id", str(uuid.uuid4()))
        resp.headers["X-Request-Id"] = rid
        resp.headers["X-Request-Duration-ms"] = str(dur_ms)
        if "Cache-Control" not in resp.headers:
            resp.headers["Cache-Control"] = "no-store"
        ident = g.get("identity")
        access_log.info(
            {
                "request_id": rid,
                "user_id": ident["user_id"] if ident else None,
                "method": request.method,
                "path": request.path,
                "status": resp.status_code,
                "duration_ms": dur_ms,
            }
        )
        return resp

    @app.teardown_appcontext
    def _teardown(_exc: BaseException | None) -> None:
        remove_session()

    # --- Register blueprints ---
    app.register_blueprint(home_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(appointments_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(health_bp)

    return app
