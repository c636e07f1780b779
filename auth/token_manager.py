"""
OAuth2 client-credentials token management with caching and thread-safety.

Features:
- One cached bearer token per TokenManager instance
- Refresh only when the token is absent or inside the expiry margin
- Single-flight refresh: concurrent cache misses share one exchange
"""

import base64
import threading
import time
from logging import Logger
from typing import Callable

import requests

from config.config_models import ClientCredentials, TokenInfo
from utils.exceptions import TokenExchangeError
from utils.logging_utils import get_server_logger
from utils.retry import token_exchange_retrying

logger: Logger = get_server_logger(__name__)

DEFAULT_EXPIRES_IN = 300


class TokenManager:
    """Manages the partner API bearer token.

    The cached token is owned by the instance; nothing else writes it. A
    ``clock`` returning epoch seconds can be injected for tests.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        token_url: str,
        scope: str | None = None,
        expiry_margin: float = 30,
        timeout: float = 15,
        max_attempts: int = 2,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize token manager.

        Args:
            credentials: OAuth2 client id and secret
            token_url: Full URL of the authorization server token endpoint
            scope: Optional scope sent with the exchange
            expiry_margin: Seconds before stated expiry at which a token is
                treated as expired
            timeout: Per-attempt timeout for the token endpoint, in seconds
            max_attempts: Attempts made when the endpoint cannot be reached
            clock: Source of the current time in epoch seconds
        """
        self.credentials = credentials
        self.token_url = token_url
        self.scope = scope
        self.expiry_margin = expiry_margin
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._clock = clock
        self._token_info = TokenInfo()
        self._lock = threading.Lock()

    def get_token(self) -> str:
        """Get valid token, refreshing if necessary.

        Returns:
            Valid bearer token

        Raises:
            TokenExchangeError: If the exchange fails or yields no token
        """
        with self._lock:
            if self._is_token_valid():
                return self._token_info.token  # type: ignore[return-value]

            return self._fetch_new_token()

    def invalidate(self) -> None:
        """Drop the cached token so the next call performs an exchange."""
        with self._lock:
            self._token_info = TokenInfo()
        logger.info("Cached access token invalidated")

    def _is_token_valid(self) -> bool:
        """Check if cached token is still valid, honouring the margin."""
        if not self._token_info.token:
            return False

        return self._clock() < self._token_info.expiry - self.expiry_margin

    def _build_auth_header(self) -> str:
        auth_string = f"{self.credentials.client_id}:{self.credentials.client_secret}"
        return "Basic " + base64.b64encode(auth_string.encode()).decode()

    def _post_token_request(self) -> requests.Response:
        form = {"grant_type": "client_credentials"}
        if self.scope:
            form["scope"] = self.scope

        headers = {
            "Authorization": self._build_auth_header(),
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        try:
            for attempt in token_exchange_retrying(self.max_attempts):
                with attempt:
                    return requests.post(
                        self.token_url, data=form, headers=headers, timeout=self.timeout
                    )
        except requests.exceptions.Timeout as err:
            raise TokenExchangeError(
                "Timeout connecting to token endpoint", upstream_body=str(err)
            ) from err
        except requests.exceptions.RequestException as err:
            raise TokenExchangeError(
                "Could not reach token endpoint", upstream_body=str(err)
            ) from err

    def _fetch_new_token(self) -> str:
        """Perform the client-credentials exchange and cache the result."""
        logger.info("Fetching new access token from %s", self.token_url)

        response = self._post_token_request()
        status = response.status_code
        body = response.text

        if not 200 <= status < 300:
            raise TokenExchangeError(
                f"Token endpoint returned HTTP {status}",
                upstream_status=status,
                upstream_body=body,
            )

        try:
            token_response = response.json()
        except ValueError as err:
            raise TokenExchangeError(
                "Token endpoint returned a non-JSON body",
                upstream_status=status,
                upstream_body=body,
            ) from err

        access_token = (
            token_response.get("access_token") if isinstance(token_response, dict) else None
        )
        if not access_token or not isinstance(access_token, str):
            raise TokenExchangeError(
                "Token endpoint response has no access_token",
                upstream_status=status,
                upstream_body=body,
            )

        raw_expires_in = token_response.get("expires_in")
        try:
            expires_in = (
                DEFAULT_EXPIRES_IN if raw_expires_in is None else int(float(raw_expires_in))
            )
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring unusable expires_in from token endpoint: %r", raw_expires_in)
            expires_in = DEFAULT_EXPIRES_IN

        self._token_info = TokenInfo(token=access_token, expiry=self._clock() + expires_in)

        logger.info("Access token fetched successfully, expires in %ss", expires_in)
        return access_token
