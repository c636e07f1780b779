"""
Inbound request authentication.

This module checks internal callers against the configured shared secret.
"""

import hmac
from logging import Logger

from flask import Request

from utils.logging_utils import get_client_logger

logger: Logger = get_client_logger(__name__)

SECRET_HEADER = "x-internal-secret"


class RequestValidator:
    """Validates incoming requests against the internal shared secret.

    The secret travels in the ``x-internal-secret`` header and is compared in
    constant time.
    """

    def __init__(self, shared_secret: str) -> None:
        """Initialize validator with the shared secret.

        Args:
            shared_secret: Secret every protected request must present
        """
        if not shared_secret:
            raise ValueError("Shared secret must not be empty")
        self._secret = shared_secret.encode()

    def validate(self, request: Request) -> bool:
        """Validate request authentication.

        Args:
            request: Flask request object

        Returns:
            True if request is authenticated, False otherwise
        """
        presented = RequestValidator._extract_secret(request)

        if not presented:
            logger.warning("Missing %s header", SECRET_HEADER)
            return False

        if not hmac.compare_digest(presented.encode(), self._secret):
            logger.warning("Invalid %s header", SECRET_HEADER)
            return False

        logger.debug("Request authenticated successfully")
        return True

    @staticmethod
    def _extract_secret(request: Request) -> str | None:
        """Extract the shared secret from request headers."""
        return request.headers.get(SECRET_HEADER)
