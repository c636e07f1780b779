"""
Configuration loading from the process environment.

Several deployments grew different names for the same setting. Each setting
has an explicit precedence list below; the first non-empty variable wins.
"""

import os
from logging import Logger
from typing import Mapping

from pydantic import ValidationError as PydanticValidationError

from config.config_models import DEFAULT_BASE_URL, DEFAULT_TOKEN_URL, ProxyConfig
from utils.exceptions import ConfigValidationError
from utils.logging_utils import get_server_logger

logger: Logger = get_server_logger(__name__)

# field name -> (env names in precedence order)
ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "client_id": ("CD_CLIENT_ID", "CONSUMER_DIRECT_CLIENT_ID", "CONSUMER_DIRECT_API_KEY"),
    "client_secret": (
        "CD_CLIENT_SECRET",
        "CONSUMER_DIRECT_CLIENT_SECRET",
        "CONSUMER_DIRECT_API_SECRET",
    ),
    "base_url": ("CD_BASE_URL", "CONSUMER_DIRECT_BASE_URL"),
    "token_url": ("CONSUMER_DIRECT_TOKEN_URL",),
    "target_entity": ("CONSUMER_DIRECT_TARGET_ENTITY",),
    "shared_secret": ("INTERNAL_SHARED_SECRET", "CD_PROXY_INTERNAL_SHARED_SECRET"),
    "host": ("HOST",),
    "port": ("PORT",),
    "upstream_timeout": ("UPSTREAM_TIMEOUT_SECONDS",),
    "token_timeout": ("TOKEN_TIMEOUT_SECONDS",),
    "token_expiry_margin": ("TOKEN_EXPIRY_MARGIN_SECONDS",),
    "token_max_attempts": ("TOKEN_MAX_ATTEMPTS",),
    "customer_creation_enabled": ("CUSTOMER_CREATION_ENABLED",),
    "passthrough_enabled": ("PAPI_PASSTHROUGH_ENABLED",),
}

REQUIRED_FIELDS = ("client_id", "client_secret", "base_url", "token_url", "shared_secret")

DEFAULTS = {
    "base_url": DEFAULT_BASE_URL,
    "token_url": DEFAULT_TOKEN_URL,
}


def resolve_env(environ: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    """Return the first non-empty value among ``names``, or None."""
    for name in names:
        value = environ.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def describe_env_presence(environ: Mapping[str, str] | None = None) -> dict[str, bool]:
    """Report which known variables are set, by name only."""
    if environ is None:
        environ = os.environ
    return {
        name: bool((environ.get(name) or "").strip())
        for names in ENV_ALIASES.values()
        for name in names
    }


def _format_pydantic_errors(err: PydanticValidationError) -> tuple[list[str], str]:
    # Only locations and messages; pydantic's str() would include input values.
    fields = []
    lines = []
    for error in err.errors():
        field = ".".join(str(part) for part in error["loc"])
        fields.append(field)
        env_names = " / ".join(ENV_ALIASES.get(field, (field,)))
        lines.append(f"{field} ({env_names}): {error['msg']}")
    return fields, "; ".join(lines)


def load_proxy_config(
    environ: Mapping[str, str] | None = None, **overrides
) -> ProxyConfig:
    """Build the ProxyConfig from environment variables.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)
        **overrides: Field values taking precedence over the environment,
            e.g. CLI ``port``/``host``. ``None`` values are ignored.

    Returns:
        Validated ProxyConfig

    Raises:
        ConfigValidationError: If required settings are missing or invalid.
            The message names settings and accepted variables, never values.
    """
    if environ is None:
        environ = os.environ

    values: dict[str, object] = {}
    for field, names in ENV_ALIASES.items():
        value = resolve_env(environ, names)
        if value is None:
            value = DEFAULTS.get(field)
        if value is not None:
            values[field] = value

    values.update({k: v for k, v in overrides.items() if v is not None})

    missing = [field for field in REQUIRED_FIELDS if field not in values]
    if missing:
        described = ", ".join(
            f"{field} ({' / '.join(ENV_ALIASES[field])})" for field in missing
        )
        raise ConfigValidationError(
            f"Missing required configuration: {described}", fields=missing
        )

    try:
        config = ProxyConfig(**values)
    except PydanticValidationError as err:
        fields, message = _format_pydantic_errors(err)
        raise ConfigValidationError(
            f"Invalid configuration: {message}", fields=fields
        ) from None

    logger.info(
        "Loaded proxy configuration: base_url=%s, token_url=%s, target_entity=%s, "
        "customer_creation_enabled=%s, passthrough_enabled=%s",
        config.base_url,
        config.token_url,
        "set" if config.target_entity else "unset",
        config.customer_creation_enabled,
        config.passthrough_enabled,
    )
    return config
