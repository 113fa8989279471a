from __future__ import annotations

from typing import Any

from flask import request


def payload() -> dict[str, Any]:
    """Request body as a flat dict, whether JSON or form-encoded."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value).strip()
