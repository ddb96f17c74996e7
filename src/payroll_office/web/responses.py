from __future__ import annotations

from typing import Any, Optional

from flask import jsonify, request

from ..common.validators import require_int
from ..core.exceptions import ValidationError


def ok(data: Any = None, *, status: int = 200, message: Optional[str] = None):
    body: dict = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, field_name)
