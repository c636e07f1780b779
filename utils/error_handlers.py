"""
Error handling utilities for the PAPI proxy.

This module provides consistent error responses across all endpoints. Every
caller-facing error body has the shape ``{"error": <kind>, "message"?: ...,
"details"?: ...}``.
"""

import re
from typing import Any

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from utils.exceptions import ProxyError, ProxyException, TokenExchangeError
from utils.logging_utils import get_server_logger

logger = get_server_logger(__name__)


def create_error_response(
    error: str,
    status_code: int,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """Create a standardized error response.

    Args:
        error: Machine-readable error kind (e.g., 'unauthorized')
        status_code: HTTP status code
        message: Optional human-readable message
        details: Optional structured details

    Returns:
        Tuple of (jsonify(error), status_code)
    """
    body: dict[str, Any] = {"error": error}
    if message:
        body["message"] = message
    if details:
        body["details"] = details
    return jsonify(body), status_code


def handle_proxy_exception(err: ProxyException) -> tuple[Response, int]:
    """Render a ProxyException raised anywhere below a route."""
    if isinstance(err, TokenExchangeError):
        logger.error(
            "Token exchange failed: status=%s, body=%s",
            err.upstream_status,
            err.upstream_body,
        )
    elif err.status_code >= 500:
        logger.error("%s: %s", type(err).__name__, err)
    else:
        logger.info("Rejected request with %s: %s", err.status_code, err.error)

    return jsonify(err.to_dict()), err.status_code


def handle_http_exception(err: HTTPException) -> tuple[Response, int]:
    """Render werkzeug routing errors (404, 405, ...) as JSON."""
    error = re.sub(r"\W+", "_", (err.name or "http_error").lower()).strip("_")
    return create_error_response(error, err.code or 500)


def handle_unexpected_exception(err: Exception) -> tuple[Response, int]:
    """Last-resort handler: log the detail, return a generic 500."""
    logger.error(f"Unexpected error while proxying request: {err}", exc_info=True)
    return jsonify(
        ProxyError("Unexpected error while proxying request").to_dict()
    ), 500


def register_error_handlers(app: Flask) -> None:
    """Install the proxy's error handlers on a Flask app."""
    app.register_error_handler(ProxyException, handle_proxy_exception)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_unexpected_exception)
