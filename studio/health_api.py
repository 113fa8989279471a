from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint
from sqlalchemy.exc import SQLAlchemyError

from .db import ping

bp = Blueprint("health_api", __name__)

log = logging.getLogger("studio.health")


@bp.get("/healthz")
def healthz() -> tuple[dict[str, Any], int]:
    # Liveness plus a store round-trip for orchestrators
    try:
        ping()
    except SQLAlchemyError as e:
        log.warning("health check db ping failed: %s", e)
        return {"status": "degraded", "db": "unreachable"}, 503
    return {"status": "ok", "db": "ok"}, 200
