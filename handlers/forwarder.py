"""Outbound forwarding to the partner API.

Builds the outbound request from a ForwardRequest, attaches the bearer token,
dispatches it once and hands the partner's answer back untouched.
"""

import json
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import requests

from auth.token_manager import TokenManager
from utils.exceptions import UpstreamUnavailableError
from utils.http_logging import dump_http_request, dump_http_response
from utils.logging_utils import get_server_logger, get_transport_logger

logger = get_server_logger(__name__)
transport_logger = get_transport_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"

# Hop-by-hop headers (RFC 7230 6.1) plus headers that must never reach the partner.
STRIPPED_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
        "x-internal-secret",
        "authorization",
        "cookie",
    }
)

BODYLESS_METHODS = frozenset({"GET", "HEAD"})

QueryParams = list[tuple[str, str]]


@dataclass
class ForwardRequest:
    """One outbound call to the partner API.

    Attributes:
        method: HTTP method
        path: Path below the partner base URL, starting with '/'
        query: Query parameters in order, repeated keys allowed
        headers: Inbound headers to carry over (filtered before sending)
        json_body: JSON-serialisable body, sent with application/json
        raw_body: Raw bytes sent as-is; takes precedence over json_body
        tid: Trace ID for log correlation
    """

    method: str
    path: str
    query: QueryParams = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    json_body: Any | None = None
    raw_body: bytes | None = None
    tid: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class ForwardResponse:
    """The partner's answer, relayed verbatim to the caller."""

    status_code: int
    content_type: str
    body: bytes


def build_outbound_headers(
    inbound: Mapping[str, str], token: str, has_json_body: bool
) -> dict[str, str]:
    """Filter inbound headers and attach partner authentication."""
    headers = {
        name: value
        for name, value in inbound.items()
        if name.lower() not in STRIPPED_HEADERS
    }
    headers["Authorization"] = f"Bearer {token}"
    if has_json_body:
        for name in [n for n in headers if n.lower() == "content-type"]:
            del headers[name]
        headers["Content-Type"] = "application/json"
    return headers


def query_from_filters(filters: Mapping[str, Any]) -> QueryParams:
    """Flatten a JSON filter object into query parameters.

    Lists become repeated keys, nested objects are sent as compact JSON,
    booleans as lowercase literals and None values are dropped.
    """
    query: QueryParams = []
    for key, value in filters.items():
        values: Iterable[Any] = value if isinstance(value, list) else [value]
        for item in values:
            if item is None:
                continue
            if isinstance(item, bool):
                query.append((key, "true" if item else "false"))
            elif isinstance(item, (dict, list)):
                query.append((key, json.dumps(item, separators=(",", ":"))))
            else:
                query.append((key, str(item)))
    return query


class PartnerForwarder:
    """Dispatches ForwardRequests to the partner API with a bearer token."""

    def __init__(
        self, base_url: str, token_manager: TokenManager, timeout: float = 30
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token_manager = token_manager
        self.timeout = timeout

    def forward(self, fwd: ForwardRequest) -> ForwardResponse:
        """Forward one request; exactly one partner call per invocation.

        Raises:
            TokenExchangeError: If no bearer token can be obtained
            UpstreamUnavailableError: If the partner times out or is unreachable
        """
        token = self.token_manager.get_token()

        method = fwd.method.upper()
        url = f"{self.base_url}{fwd.path}"

        data: bytes | None = None
        if method not in BODYLESS_METHODS:
            if fwd.raw_body is not None:
                data = fwd.raw_body
            elif fwd.json_body is not None:
                data = json.dumps(fwd.json_body).encode()

        has_json_body = data is not None and (
            fwd.json_body is not None
            or "json" in _header_value(fwd.headers, "content-type", DEFAULT_CONTENT_TYPE)
        )
        headers = build_outbound_headers(fwd.headers, token, has_json_body)

        logger.info(f"OUT_REQ: tid={fwd.tid}, method={method}, url={url}")
        dump_http_request(transport_logger, fwd.tid, method, url, headers, data)

        try:
            response = requests.request(
                method,
                url,
                params=fwd.query or None,
                headers=headers,
                data=data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as err:
            logger.error(f"OUT_ERR: tid={fwd.tid}, reason=timeout, error={err}")
            raise UpstreamUnavailableError(
                f"Partner API did not respond within {self.timeout:g}s"
            ) from err
        except requests.exceptions.ConnectionError as err:
            logger.error(f"OUT_ERR: tid={fwd.tid}, reason=connection, error={err}")
            raise UpstreamUnavailableError("Partner API is unreachable") from err

        logger.info(f"OUT_RSP: tid={fwd.tid}, status={response.status_code}")
        dump_http_response(
            transport_logger, fwd.tid, response.status_code, response.headers,
            response.content, url,
        )

        if response.status_code == 401:
            # The partner rejected our token; force a fresh exchange next time.
            self.token_manager.invalidate()

        return ForwardResponse(
            status_code=response.status_code,
            content_type=response.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE,
            body=response.content,
        )


def _header_value(headers: Mapping[str, str], name: str, default: str) -> str:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return default
