"""Blueprint for generic passthrough to the partner API under /papi/."""

import uuid
from typing import TYPE_CHECKING

from flask import Blueprint, Response, request

from blueprints.helpers import relay_response, secret_required
from handlers.forwarder import ForwardRequest
from utils.logging_utils import get_server_logger

if TYPE_CHECKING:
    from config import ProxyConfig, ProxyGlobalContext

logger = get_server_logger(__name__)

passthrough_bp = Blueprint("passthrough", __name__, url_prefix="/papi")

PASSTHROUGH_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]

# These will be set by init_passthrough_blueprint() in proxy_server.py
_proxy_config: "ProxyConfig" = None  # type: ignore
_ctx: "ProxyGlobalContext" = None  # type: ignore


def init_passthrough_blueprint(
    proxy_config: "ProxyConfig", ctx: "ProxyGlobalContext"
) -> None:
    """Initialize blueprint with configuration and context."""
    global _proxy_config, _ctx
    _proxy_config = proxy_config
    _ctx = ctx


def _get_ctx() -> "ProxyGlobalContext":
    return _ctx


@passthrough_bp.route("/<path:subpath>", methods=PASSTHROUGH_METHODS)
@secret_required(_get_ctx)
def passthrough(subpath: str) -> Response:
    """Relay any method, path and query string to the partner base URL."""
    tid = str(uuid.uuid4())
    logger.info(f"CLIENT_REQ: tid={tid}, route=papi, method={request.method}, path=/{subpath}")

    result = _ctx.get_forwarder().forward(
        ForwardRequest(
            method=request.method,
            path=f"/{subpath}",
            query=list(request.args.items(multi=True)),
            headers=dict(request.headers),
            raw_body=request.get_data() or None,
            tid=tid,
        )
    )
    return relay_response(result)
