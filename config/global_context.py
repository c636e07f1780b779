"""
Global application context for the PAPI proxy.

This module provides a singleton ProxyGlobalContext that holds the application
configuration and the process-wide services built from it: the token manager
and the partner forwarder.
"""

import threading
from logging import Logger
from typing import TYPE_CHECKING

from config.config_models import ProxyConfig
from utils import logging_utils

if TYPE_CHECKING:
    from auth.request_validator import RequestValidator
    from auth.token_manager import TokenManager
    from handlers.forwarder import PartnerForwarder

logger: Logger = logging_utils.get_server_logger(__name__)


class ProxyGlobalContext:
    """Singleton global context holding configuration and services."""

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def initialize(
        self,
        config: ProxyConfig,
        token_manager: "TokenManager | None" = None,
        forwarder: "PartnerForwarder | None" = None,
    ) -> None:
        """Initialize the global context with configuration.

        Args:
            config: The loaded ProxyConfig instance
            token_manager: Pre-built token manager (tests inject fakes here)
            forwarder: Pre-built forwarder; built from config when omitted
        """
        from auth.request_validator import RequestValidator
        from auth.token_manager import TokenManager
        from handlers.forwarder import PartnerForwarder

        self.config = config
        self.request_validator: "RequestValidator" = RequestValidator(
            config.shared_secret.get_secret_value()
        )
        if token_manager is None:
            token_manager = TokenManager(
                config.credentials,
                config.token_url,
                scope=config.scope,
                expiry_margin=config.token_expiry_margin,
                timeout=config.token_timeout,
                max_attempts=config.token_max_attempts,
            )
        self.token_manager: "TokenManager" = token_manager
        if forwarder is None:
            forwarder = PartnerForwarder(
                config.base_url, token_manager, timeout=config.upstream_timeout
            )
        self.forwarder: "PartnerForwarder" = forwarder
        logger.info("ProxyGlobalContext initialized for partner %s", config.base_url)

    def get_forwarder(self) -> "PartnerForwarder":
        return self.forwarder
