"""
Unit tests for config/global_context.py.
"""

from unittest.mock import MagicMock

from auth import RequestValidator, TokenManager
from config import ProxyGlobalContext
from handlers.forwarder import PartnerForwarder


class TestProxyGlobalContext:
    def test_is_singleton(self):
        assert ProxyGlobalContext() is ProxyGlobalContext()

    def test_initialize_builds_services_from_config(self, proxy_config):
        ctx = ProxyGlobalContext()
        ctx.initialize(proxy_config)

        assert isinstance(ctx.request_validator, RequestValidator)
        assert isinstance(ctx.token_manager, TokenManager)
        assert ctx.token_manager.token_url == "https://auth.test/oauth2/token"
        assert ctx.token_manager.expiry_margin == proxy_config.token_expiry_margin
        assert ctx.token_manager.max_attempts == proxy_config.token_max_attempts

        forwarder = ctx.get_forwarder()
        assert isinstance(forwarder, PartnerForwarder)
        assert forwarder.base_url == "https://papi.test"
        assert forwarder.token_manager is ctx.token_manager
        assert forwarder.timeout == proxy_config.upstream_timeout

    def test_initialize_wires_injected_token_manager(self, proxy_config):
        token_manager = MagicMock()
        ctx = ProxyGlobalContext()
        ctx.initialize(proxy_config, token_manager=token_manager)

        assert ctx.get_forwarder().token_manager is token_manager
