"""
Utility functions package for the PAPI proxy.

This package handles:
- Logging configuration and setup
- Exception taxonomy and Flask error handlers
- Retry policy for the token exchange
- Transport-level HTTP logging
"""

from .logging_utils import init_logging, get_server_logger, get_transport_logger
from .error_handlers import register_error_handlers, create_error_response

__all__ = [
    'init_logging',
    'get_server_logger',
    'get_transport_logger',
    'register_error_handlers',
    'create_error_response',
]
