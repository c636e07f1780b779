"""
Configuration models for the PAPI proxy.

This module defines the core configuration structures used throughout the proxy.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

DEFAULT_BASE_URL = "https://papi.consumerdirect.io"
DEFAULT_TOKEN_URL = "https://auth.consumerdirect.io/oauth2/token"
DEFAULT_PORT = 10000
MIN_TOKEN_EXPIRY_MARGIN = 5


@dataclass(frozen=True)
class ClientCredentials:
    """OAuth2 client credentials for the partner authorization server."""

    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"ClientCredentials(client_id={self.client_id!r}, client_secret='***')"


@dataclass
class TokenInfo:
    """The single cached bearer token and its absolute expiry (epoch seconds)."""

    token: str | None = None
    expiry: float = 0


class ProxyConfig(BaseModel):
    """Process-wide proxy configuration, validated once at startup."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    client_id: str = Field(min_length=1)
    client_secret: SecretStr
    base_url: str = DEFAULT_BASE_URL
    token_url: str = DEFAULT_TOKEN_URL
    target_entity: str | None = None
    shared_secret: SecretStr

    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)

    upstream_timeout: float = Field(default=30, gt=0)
    token_timeout: float = Field(default=15, gt=0)
    token_expiry_margin: float = Field(default=30, ge=MIN_TOKEN_EXPIRY_MARGIN)
    token_max_attempts: int = Field(default=2, ge=1)

    customer_creation_enabled: bool = False
    passthrough_enabled: bool = False

    @field_validator("base_url", "token_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return value

    @field_validator("client_secret", "shared_secret")
    @classmethod
    def _check_secret(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("must not be empty")
        return value

    @field_validator("target_entity")
    @classmethod
    def _blank_target_entity(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def credentials(self) -> ClientCredentials:
        return ClientCredentials(
            client_id=self.client_id,
            client_secret=self.client_secret.get_secret_value(),
        )

    @property
    def scope(self) -> str | None:
        """OAuth2 scope derived from the target entity, if one is configured."""
        if not self.target_entity:
            return None
        return f"target-entity:{self.target_entity}"
