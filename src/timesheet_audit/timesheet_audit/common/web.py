from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def api_login_required(view):
    """Reject requests without an authenticated session user (JSON 401).

    Login itself happens outside this service; only ``session["user_id"]`` is read.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Not logged in"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def client_ip() -> Optional[str]:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.remote_addr


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


def date_arg(name: str, *, required: bool = True) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        if required:
            raise ValidationError(f"Missing parameter: {name}")
        return None
    return parse_iso_date(value)
