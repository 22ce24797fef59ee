"""Flask helpers shared by the controllers: session auth and JSON error mapping."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred. Please try again later"


def error(message: str, status: int):
    return jsonify({"error": message}), status


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def required_int(data: dict, key: str) -> int:
    """Integer field of a JSON body; missing or malformed values are a ValidationError."""
    value = data.get(key)
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{key} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error("Please log in to continue", 401)
            if session.get("role") not in allowed:
                return error("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required(Role.ADMIN)


def json_errors(view):
    """Translate domain exceptions into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return error(str(e), 400)
        except AuthenticationError as e:
            return error(str(e), 401)
        except AuthorizationError as e:
            return error(str(e), 403)
        except NotFoundError as e:
            return error(str(e), 404)
        except DomainError as e:
            logger.error("Unhandled domain error in %s: %s", view.__name__, e)
            return error(GENERIC_ERROR, 500)
        except Exception:
            logger.exception("Unexpected error in %s", view.__name__)
            return error(GENERIC_ERROR, 500)

    return wrapper
