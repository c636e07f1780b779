"""
Configuration management package for the PAPI proxy.

This package handles:
- Configuration models (ClientCredentials, TokenInfo, ProxyConfig)
- Configuration loading from environment variables with alias precedence
- The process-wide ProxyGlobalContext
"""

from .config_models import ClientCredentials, TokenInfo, ProxyConfig
from .config_parser import load_proxy_config, describe_env_presence
from .global_context import ProxyGlobalContext

__all__ = [
    'ClientCredentials',
    'TokenInfo',
    'ProxyConfig',
    'load_proxy_config',
    'describe_env_presence',
    'ProxyGlobalContext',
]
