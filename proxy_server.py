"""PAPI proxy server: application factory and process entry point."""

import os
import sys
from logging import Logger

from flask import Flask

from auth import TokenManager
from blueprints import (
    customers_bp,
    health_bp,
    init_customers_blueprint,
    init_passthrough_blueprint,
    passthrough_bp,
)
from cli import parse_arguments
from config import ProxyConfig, ProxyGlobalContext, describe_env_presence, load_proxy_config
from handlers.forwarder import PartnerForwarder
from utils.error_handlers import register_error_handlers
from utils.exceptions import ConfigValidationError
from utils.logging_utils import get_server_logger, init_logging
from version import get_version_string

logger: Logger = get_server_logger(__name__)


def create_app(
    proxy_config: ProxyConfig,
    token_manager: TokenManager | None = None,
    forwarder: PartnerForwarder | None = None,
) -> Flask:
    """Build the Flask app for a validated configuration.

    Args:
        proxy_config: Validated configuration
        token_manager: Optional pre-built token manager
        forwarder: Optional pre-built partner forwarder

    Returns:
        Configured Flask application
    """
    ctx = ProxyGlobalContext()
    ctx.initialize(proxy_config, token_manager=token_manager, forwarder=forwarder)

    app = Flask(__name__)
    register_error_handlers(app)

    init_customers_blueprint(proxy_config, ctx)
    app.register_blueprint(health_bp)
    app.register_blueprint(customers_bp)

    if proxy_config.passthrough_enabled:
        init_passthrough_blueprint(proxy_config, ctx)
        app.register_blueprint(passthrough_bp)

    return app


def main() -> None:
    """Main entry point for the PAPI proxy server."""
    args = parse_arguments()

    init_logging(debug=args.debug)

    logger.info(f"PAPI Proxy Server - Version: {get_version_string()}")
    logger.info("ENV CHECK (names only): %s", describe_env_presence(os.environ))

    try:
        proxy_config = load_proxy_config(os.environ, port=args.port, host=args.host)
    except ConfigValidationError as err:
        logger.error(f"Cannot start: {err}")
        sys.exit(1)

    app = create_app(proxy_config)

    host = proxy_config.host
    port = proxy_config.port
    logger.info(f"Starting proxy server on host {host} and port {port}...")
    logger.info("Available endpoints:")
    logger.info(f"  - Health: http://{host}:{port}/health")
    logger.info(f"  - Credit score: http://{host}:{port}/get-credit-score")
    logger.info(f"  - List customers: http://{host}:{port}/list-customers")
    logger.info(
        f"  - Create customer: http://{host}:{port}/create-customer"
        f" ({'enabled' if proxy_config.customer_creation_enabled else 'disabled by policy'})"
    )
    logger.info(f"  - Login as: http://{host}:{port}/login-as")
    if proxy_config.passthrough_enabled:
        logger.info(f"  - Passthrough: http://{host}:{port}/papi/<path>")
    app.run(host=host, port=port, debug=args.debug, threaded=True)


if __name__ == "__main__":
    main()
