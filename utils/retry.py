"""
Retry policy for the OAuth2 token exchange.

Only transport-level failures (connection refused, timeouts) are retried.
An HTTP error status from the authorization server is an answer, not a
transient failure, and is surfaced immediately.
"""

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from utils.logging_utils import get_transport_logger

logger = get_transport_logger(__name__)

RETRY_MULTIPLIER = 0.5  # Exponential backoff multiplier
RETRY_MIN_WAIT = 0  # Minimum wait time in seconds
RETRY_MAX_WAIT = 4  # Maximum wait time in seconds

TRANSIENT_ERRORS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


def _log_before_sleep(retry_state) -> None:
    logger.warning(
        f"Token endpoint unreachable, retrying in "
        f"{retry_state.next_action.sleep if retry_state.next_action else 'unknown'} seconds "
        f"(attempt {retry_state.attempt_number}): "
        f"{retry_state.outcome.exception() if retry_state.outcome else 'unknown error'}"
    )


def token_exchange_retrying(max_attempts: int) -> Retrying:
    """Build a tenacity controller for one token exchange.

    The last transient exception is re-raised unchanged once attempts run out.
    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=RETRY_MULTIPLIER, min=RETRY_MIN_WAIT, max=RETRY_MAX_WAIT
        ),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        before_sleep=_log_before_sleep,
        reraise=True,
    )
