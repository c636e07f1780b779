"""Blueprint for the fixed partner customer operations."""

import uuid
from typing import TYPE_CHECKING
from urllib.parse import quote

from flask import Blueprint, Response, request

from blueprints.helpers import (
    get_json_object,
    relay_response,
    require_fields,
    secret_required,
)
from handlers.forwarder import ForwardRequest, query_from_filters
from utils.exceptions import PolicyDisabledError, ValidationError
from utils.logging_utils import get_server_logger

if TYPE_CHECKING:
    from config import ProxyConfig, ProxyGlobalContext

logger = get_server_logger(__name__)

customers_bp = Blueprint("customers", __name__)

# These will be set by init_customers_blueprint() in proxy_server.py
_proxy_config: "ProxyConfig" = None  # type: ignore
_ctx: "ProxyGlobalContext" = None  # type: ignore

CUSTOMERS_PATH = "/v1/customers"

CUSTOMER_CREATION_DISABLED_MESSAGE = (
    "Customer creation is disabled on this proxy. Customers must be enrolled "
    "through the partner's consumer-facing enrollment flow."
)


def init_customers_blueprint(
    proxy_config: "ProxyConfig", ctx: "ProxyGlobalContext"
) -> None:
    """Initialize blueprint with configuration and context.

    Args:
        proxy_config: The proxy configuration
        ctx: The global context
    """
    global _proxy_config, _ctx
    _proxy_config = proxy_config
    _ctx = ctx


def _get_ctx() -> "ProxyGlobalContext":
    return _ctx


def _customer_path(customer_token: str, suffix: str = "") -> str:
    # Dot segments survive quoting and are collapsed by the HTTP client.
    if customer_token in (".", ".."):
        raise ValidationError(
            "Invalid customerToken", details={"field": "customerToken"}
        )
    return f"{CUSTOMERS_PATH}/{quote(customer_token, safe='')}{suffix}"


@customers_bp.route("/get-credit-score", methods=["POST"])
@secret_required(_get_ctx)
def get_credit_score() -> Response:
    """Look up a customer's credit scores."""
    tid = str(uuid.uuid4())
    (customer_token,) = require_fields(get_json_object(), "customerToken")
    logger.info(f"CLIENT_REQ: tid={tid}, route=get-credit-score")

    result = _ctx.get_forwarder().forward(
        ForwardRequest(
            method="GET",
            path=_customer_path(customer_token, "/credit-scores"),
            headers={"Accept": "application/json"},
            tid=tid,
        )
    )
    return relay_response(result)


@customers_bp.route("/list-customers", methods=["GET", "POST"])
@secret_required(_get_ctx)
def list_customers() -> Response:
    """List customers; query args and JSON body fields become partner filters."""
    tid = str(uuid.uuid4())
    query = [(key, value) for key, values in request.args.lists() for value in values]
    if request.method == "POST":
        query.extend(query_from_filters(get_json_object()))
    logger.info(f"CLIENT_REQ: tid={tid}, route=list-customers, filters={len(query)}")

    result = _ctx.get_forwarder().forward(
        ForwardRequest(
            method="GET",
            path=CUSTOMERS_PATH,
            query=query,
            headers={"Accept": "application/json"},
            tid=tid,
        )
    )
    return relay_response(result)


@customers_bp.route("/create-customer", methods=["POST"])
@secret_required(_get_ctx)
def create_customer() -> Response:
    """Create a customer, unless creation is switched off by policy."""
    tid = str(uuid.uuid4())
    if not _proxy_config.customer_creation_enabled:
        logger.info(f"CLIENT_REQ: tid={tid}, route=create-customer, rejected=policy")
        raise PolicyDisabledError(CUSTOMER_CREATION_DISABLED_MESSAGE)

    if request.get_json(silent=True) is None:
        raise ValidationError("Request body must be valid JSON")
    logger.info(f"CLIENT_REQ: tid={tid}, route=create-customer")

    result = _ctx.get_forwarder().forward(
        ForwardRequest(
            method="POST",
            path=CUSTOMERS_PATH,
            headers={"Accept": "application/json"},
            raw_body=request.get_data(),
            tid=tid,
        )
    )
    return relay_response(result)


@customers_bp.route("/login-as", methods=["POST"])
@secret_required(_get_ctx)
def login_as() -> Response:
    """Issue a login-as one-time code so an agent can act as the customer."""
    tid = str(uuid.uuid4())
    payload = get_json_object()
    customer_token, agent_id = require_fields(payload, "customerToken", "agentId")
    logger.info(f"CLIENT_REQ: tid={tid}, route=login-as, agent={agent_id}")

    body = {k: v for k, v in payload.items() if k != "customerToken"}
    body["agentId"] = agent_id

    result = _ctx.get_forwarder().forward(
        ForwardRequest(
            method="POST",
            path=_customer_path(customer_token, "/otcs/login-as"),
            headers={"Accept": "application/json"},
            json_body=body,
            tid=tid,
        )
    )
    return relay_response(result)
