"""Settings for the identity flow, read from the environment or a .env file."""

import json
from typing import Any, Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..tools.exceptions import ConfigurationError
from ..tools.validation import sanitize_base_url, validate_url
from .const import (
    CLIENT_ASSERTION_TYPE_JWT_BEARER,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT,
    TOKEN_ENDPOINT_PATH,
    USERINFO_ENDPOINT_PATH,
    USERINFO_RESPONSE_TYPE_JWE,
    USERINFO_RESPONSE_TYPE_JWT,
)


class IdentitySettings(BaseSettings):
    """Configuration of the relying party towards the eSignet service.

    Field names map case-insensitively onto the environment variables used by
    existing deployments (ESIGNET_SERVICE_URL, CLIENT_PRIVATE_KEY, ...).
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Base URL of the eSignet service, the endpoint paths are appended to it
    esignet_service_url: str = ""
    client_assertion_type: str = CLIENT_ASSERTION_TYPE_JWT_BEARER
    # Private JWK used to sign client assertions (dict, JSON or base64 JSON)
    client_private_key: Optional[str] = None
    # Whether the userinfo endpoint answers with a signed JWT or an encrypted JWE
    userinfo_response_type: Literal["jwt", "jwe"] = USERINFO_RESPONSE_TYPE_JWT
    # Base64 encoded private JWK, required only for "jwe" responses
    jwe_userinfo_private_key: Optional[str] = None

    # Network options
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    tls_verify: bool = True
    tls_ca_path: Optional[str] = None

    # Listener of the delegate service
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)

    # If enabled, token and userinfo request/response bodies are logged at debug level
    verbose_debug_mode: bool = False

    @field_validator("esignet_service_url", mode="before")
    @classmethod
    def _check_service_url(cls, value: Any) -> str:
        url = sanitize_base_url(value or "")
        if url and not validate_url(url):
            raise ValueError(f"invalid service URL: {url}")
        return url

    @field_validator("client_private_key", "jwe_userinfo_private_key", mode="before")
    @classmethod
    def _serialize_jwk(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return json.dumps(value)
        return value

    @field_validator("userinfo_response_type", mode="before")
    @classmethod
    def _lower_response_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return USERINFO_RESPONSE_TYPE_JWT
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def encrypted_userinfo(self) -> bool:
        """Whether userinfo responses are expected to be JWE encrypted."""
        return self.userinfo_response_type == USERINFO_RESPONSE_TYPE_JWE

    @property
    def token_endpoint(self) -> str:
        """Exact token endpoint URL, also used as the client assertion audience."""
        return self._endpoint(TOKEN_ENDPOINT_PATH)

    @property
    def userinfo_endpoint(self) -> str:
        """Userinfo endpoint URL."""
        return self._endpoint(USERINFO_ENDPOINT_PATH)

    def _endpoint(self, path: str) -> str:
        if not self.esignet_service_url:
            raise ConfigurationError("ESIGNET_SERVICE_URL is not configured")
        return self.esignet_service_url + path

    def check_minimum_config(self) -> None:
        """Raises ConfigurationError listing every missing required setting."""
        missing = [
            name
            for name, value in [
                ("ESIGNET_SERVICE_URL", self.esignet_service_url),
                ("CLIENT_ASSERTION_TYPE", self.client_assertion_type),
                ("CLIENT_PRIVATE_KEY", self.client_private_key),
            ]
            if not value
        ]
        if self.encrypted_userinfo and not self.jwe_userinfo_private_key:
            missing.append("JWE_USERINFO_PRIVATE_KEY")

        if missing:
            raise ConfigurationError(
                f"Missing identity provider settings: {', '.join(missing)}"
            )


def load_settings(**overrides: Any) -> IdentitySettings:
    """Builds the settings from the environment, applying explicit overrides.

    Validation failures are reported as ConfigurationError.
    """
    try:
        return IdentitySettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid identity provider settings: {e}") from e
