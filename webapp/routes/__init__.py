"""
Route blueprints.
"""

from flask import request, session

from utils.errors import ValidationError


def current_requester():
    """Username making the request: explicit ?requester= first, then the logged-in user."""
    return request.args.get('requester') or session.get('user')


def json_body():
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require_fields(payload, *fields):
    missing = [name for name in fields if payload.get(name) in (None, '')]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


def parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')
