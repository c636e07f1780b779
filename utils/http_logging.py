"""HTTP request/response logging utilities for transport layer debugging."""

import json
from logging import Logger
from typing import Any, Mapping

REDACTED = "***"
SENSITIVE_HEADERS = frozenset({"authorization", "x-internal-secret", "cookie"})


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with credential-bearing values masked."""
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def _emit(logger: Logger, label: str, trace_id: str, log_data: dict) -> None:
    try:
        log_message = json.dumps(log_data, indent=2, ensure_ascii=False)
        logger.info(f"{label}[{trace_id}]:\n{log_message}")
    except (TypeError, ValueError) as e:
        logger.info(f"{label}[{trace_id}]: {log_data} (JSON serialization failed: {e})")


def dump_http_request(
    logger: Logger,
    trace_id: str,
    method: str,
    url: str,
    headers: Mapping[str, str],
    payload: Any | None = None,
) -> None:
    """
    Dump an outbound HTTP request to logger with sensitive headers redacted.

    Args:
        logger: Logger instance to use for logging
        trace_id: Unique trace identifier for request/response correlation
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        headers: Request headers dictionary
        payload: Request payload (will be JSON serialized if dict/list)
    """
    log_data: dict[str, Any] = {
        "trace_id": trace_id,
        "type": "request",
        "method": method.upper(),
        "url": url,
        "headers": redact_headers(headers),
    }
    if payload is not None:
        if isinstance(payload, (dict, list)):
            log_data["payload"] = payload
        elif isinstance(payload, bytes):
            log_data["payload"] = payload.decode("utf-8", errors="replace")
        else:
            log_data["payload"] = str(payload)

    _emit(logger, "HTTP_REQUEST", trace_id, log_data)


def dump_http_response(
    logger: Logger,
    trace_id: str,
    status_code: int,
    headers: Mapping[str, str],
    body: bytes | None = None,
    url: str | None = None,
) -> None:
    """
    Dump an HTTP response received from upstream.

    Args:
        logger: Logger instance to use for logging
        trace_id: Unique trace identifier for request/response correlation
        status_code: HTTP status code
        headers: Response headers dictionary
        body: Raw response body
        url: Optional URL for additional context
    """
    log_data: dict[str, Any] = {
        "trace_id": trace_id,
        "type": "response",
        "status_code": status_code,
        "headers": redact_headers(headers),
    }
    if url:
        log_data["url"] = url
    if body:
        log_data["body"] = body.decode("utf-8", errors="replace")

    _emit(logger, "HTTP_RESPONSE", trace_id, log_data)
