"""Logging configuration for the studio backend.

Every record emitted under the ``studio`` logger carries the id of the
request it belongs to (``-`` outside a request), so one grep over the
request id reconstructs a request.
"""

from __future__ import annotations

import logging

from flask import g, has_request_context

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        rid = "-"
        if has_request_context():
            rid = getattr(g, "request_id", "-")
        record.request_id = rid
        return True


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    root = logging.getLogger("studio")
    root.setLevel(level if isinstance(level, int) else level.upper())
    # Avoid duplicate attachment when the factory runs more than once
    if not any(getattr(h, "_studio_handler", False) for h in root.handlers):
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        h.addFilter(RequestIdFilter())
        h._studio_handler = True  # type: ignore[attr-defined]
        root.addHandler(h)
    return root


__all__ = ["LOG_FORMAT", "RequestIdFilter", "configure_logging"]
