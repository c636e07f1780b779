"""
Authentication module for the PAPI proxy.

This module provides authentication-related functionality including:
- Partner API token management with caching and thread-safety
- Inbound request validation against the internal shared secret
"""

from .token_manager import TokenManager
from .request_validator import RequestValidator

__all__ = [
    'TokenManager',
    'RequestValidator',
]
