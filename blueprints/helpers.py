"""Shared utilities for Flask blueprints."""

from functools import wraps
from typing import Any, Callable, TYPE_CHECKING

from flask import Response, request

from handlers.forwarder import ForwardResponse
from utils.error_handlers import create_error_response
from utils.exceptions import ValidationError

if TYPE_CHECKING:
    from config import ProxyGlobalContext


def secret_required(get_ctx: Callable[[], "ProxyGlobalContext"]):
    """Reject the request with 401 unless it carries the shared secret.

    Runs before any body parsing so an unauthenticated caller never reaches
    the token manager or the partner.

    Args:
        get_ctx: Returns the context whose RequestValidator should be used
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not get_ctx().request_validator.validate(request):
                return create_error_response("unauthorized", 401)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def get_json_object() -> dict[str, Any]:
    """Return the request body as a JSON object, or {} when absent/not an object."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def require_fields(payload: dict[str, Any], *names: str) -> list[str]:
    """Return the values of ``names`` in order.

    Raises:
        ValidationError: Naming the first field that is missing or blank
    """
    values = []
    for name in names:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError.missing_field(name)
        values.append(str(value).strip() if isinstance(value, str) else str(value))
    return values


def relay_response(result: ForwardResponse) -> Response:
    """Turn the partner's answer into the caller's response, byte for byte."""
    return Response(
        result.body, status=result.status_code, content_type=result.content_type
    )
