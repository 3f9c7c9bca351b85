from __future__ import annotations

from functools import wraps
from typing import Any

from flask import g, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..users.session import SessionContext, SessionUser
from .datetime_utils import parse_iso_date


def session_context() -> SessionContext:
    """Session context of the current request, restored once per request."""
    ctx = g.get("session_context")
    if ctx is None:
        ctx = SessionContext.restore(session)
        g.session_context = ctx
    return ctx


def current_user() -> SessionUser:
    user = session_context().user
    if user is None:
        raise AuthenticationError("Please log in to continue")
    return user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user()
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if current_user().role not in roles:
                raise AuthorizationError("You do not have access to this page")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def date_arg(name: str = "date"):
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def ok(payload: Any = None, status: int = 200):
    return jsonify(payload if payload is not None else {"ok": True}), status


def error(message: str, status: int):
    return jsonify({"error": message}), status
