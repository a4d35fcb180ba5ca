from __future__ import annotations

import hmac
import logging
from datetime import date, datetime
from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request

from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, PostedRecordError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Api-Token"

_STATUS_BY_ERROR = (
    (ValidationError, 422),
    (NotFoundError, 404),
    (PostedRecordError, 409),
    (AuthorizationError, 403),
)


def status_for(exc: DomainError) -> int:
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, exc_type):
            return status
    return 400


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def api_endpoint(view):
    """Token guard plus the JSON error contract shared by every API route."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            expected = current_app.config.get("API_TOKEN") or ""
            supplied = request.headers.get(TOKEN_HEADER, "")
            if not expected or not hmac.compare_digest(supplied, expected):
                raise AuthorizationError("Invalid or missing API token")
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(str(e), status_for(e))
        except Exception:
            logger.exception("unhandled error in %s", request.path)
            return error_response("Internal server error", 500)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def require_date(data: dict, field: str) -> date:
    value = data.get(field)
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD)")


def optional_date(data: dict, field: str) -> Optional[date]:
    return require_date(data, field) if data.get(field) else None


def optional_datetime(data: dict, field: str) -> Optional[datetime]:
    try:
        value = data.get(field)
        return parse_iso_datetime(str(value)) if value else None
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date-time")


def uploaded_text() -> str:
    """CSV payload from a multipart ``file`` field or the raw request body."""
    upload = request.files.get("file")
    raw = upload.read() if upload else request.get_data()
    try:
        text = raw.decode("utf-8-sig") if isinstance(raw, bytes) else str(raw or "")
    except UnicodeDecodeError:
        raise ValidationError("The CSV file must be UTF-8 encoded")
    if not text.strip():
        raise ValidationError("A CSV file is required")
    return text
