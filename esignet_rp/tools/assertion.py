"""Client assertion signing for private_key_jwt token endpoint authentication."""

import logging
import time
from typing import Optional

from joserfc import jwt
from joserfc.errors import JoseError
from joserfc.jwk import RSAKey

from ..config.const import (
    CLIENT_ASSERTION_LIFETIME_SECONDS,
    CLIENT_ASSERTION_SIGNING_ALGORITHM,
)
from ..config.settings import IdentitySettings
from .exceptions import ConfigurationError
from .helpers import generate_unique_id, parse_jwk
from .validation import validate_client_id

_LOGGER = logging.getLogger(__name__)


def import_private_rsa_key(value, setting_name: str) -> RSAKey:
    """Imports a private RSA JWK, raising ConfigurationError if unusable."""
    if not value:
        raise ConfigurationError(f"{setting_name} is not configured")

    try:
        key = RSAKey.import_key(parse_jwk(value))
    except (JoseError, ValueError, TypeError, KeyError) as e:
        raise ConfigurationError(f"{setting_name} is not a valid RSA JWK") from e

    if not key.is_private:
        raise ConfigurationError(f"{setting_name} must contain a private key")
    return key


class AssertionSigner:
    """Builds short-lived JWTs that authenticate this client at the token endpoint.

    The assertion is self-issued (iss == sub == client_id) and addressed to the
    exact token endpoint URL, as required by RFC 7523 section 3.
    """

    def __init__(self, settings: IdentitySettings):
        self.settings = settings
        self._signing_key: Optional[RSAKey] = None

    def get_signing_key(self) -> RSAKey:
        """Parses and caches the configured signing key."""
        if self._signing_key is None:
            self._signing_key = import_private_rsa_key(
                self.settings.client_private_key, "CLIENT_PRIVATE_KEY"
            )
        return self._signing_key

    def sign(self, client_id: str) -> str:
        """Returns a freshly signed compact client assertion for client_id."""
        if not validate_client_id(client_id):
            raise ConfigurationError("client_id is required to sign a client assertion")

        key = self.get_signing_key()
        audience = self.settings.token_endpoint

        now = int(time.time())
        claims = {
            "iss": client_id,
            "sub": client_id,
            "aud": audience,
            # Single use, the provider rejects replayed identifiers
            "jti": generate_unique_id(),
            "iat": now,
            "exp": now + CLIENT_ASSERTION_LIFETIME_SECONDS,
        }
        header = {"alg": CLIENT_ASSERTION_SIGNING_ALGORITHM, "typ": "JWT"}
        if key.kid:
            header["kid"] = key.kid

        try:
            assertion = jwt.encode(
                header,
                claims,
                key,
                algorithms=[CLIENT_ASSERTION_SIGNING_ALGORITHM],
            )
        except JoseError as e:
            raise ConfigurationError(
                "CLIENT_PRIVATE_KEY cannot be used to sign client assertions"
            ) from e

        _LOGGER.debug(
            "Signed client assertion for %s (aud: %s, jti: %s)",
            client_id,
            audience,
            claims["jti"],
        )
        return assertion
