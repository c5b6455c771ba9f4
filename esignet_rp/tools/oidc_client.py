"""eSignet token and userinfo clients"""

import asyncio
import json
import logging
from typing import Optional

import aiohttp
from joserfc import jws
from joserfc.errors import JoseError
from joserfc.jwk import RSAKey

from ..config.settings import IdentitySettings
from ..types import ClaimsPayload, TokenResponse
from .assertion import AssertionSigner, import_private_rsa_key
from .decryption import decrypt_envelope
from .exceptions import FormatError, TransportError

_LOGGER = logging.getLogger(__name__)


class HTTPClientError(aiohttp.ClientResponseError):
    "Raised when the HTTP client encounters not OK (2xx) status code."

    body: str

    def __init__(self, *args, **kwargs):
        self.body = kwargs.pop("body")
        super().__init__(*args, **kwargs)

    def __str__(self):
        return f"{self.status} ({self.message}) with response body: {self.body}"


async def http_raise_for_status(response: aiohttp.ClientResponse) -> None:
    """Raises an exception if the response is not OK."""
    if not response.ok:
        # reason should always be not None for a started response
        assert response.reason is not None
        body = await response.text()

        raise HTTPClientError(
            response.request_info,
            response.history,
            status=response.status,
            message=response.reason,
            headers=response.headers,
            body=body,
        )


def decode_claims(value: str) -> ClaimsPayload:
    """Decodes a compact JWS payload into claims, falling back to plain JSON.

    The signature is not verified here, the token was received directly from the
    provider over TLS in exchange for our own access token.
    """
    try:
        token = jws.extract_compact(value.strip().encode("utf-8"))
        claims = json.loads(token.payload)
        if isinstance(claims, dict):
            return ClaimsPayload(claims)
    except (JoseError, ValueError) as e:
        _LOGGER.debug("Userinfo response is not a compact JWT (%s), trying JSON", e)

    try:
        parsed = json.loads(value)
    except ValueError as e:
        raise FormatError("Userinfo response is neither a JWT nor JSON") from e

    if not isinstance(parsed, dict):
        raise FormatError("Userinfo response JSON is not an object")
    return ClaimsPayload(parsed)


class ProviderClient:
    """Shared plumbing for calls to the eSignet service."""

    def __init__(self, settings: IdentitySettings, http_session: aiohttp.ClientSession):
        self.settings = settings
        self.http_session = http_session
        self.timeout = aiohttp.ClientTimeout(total=settings.request_timeout)

    def _log_verbose(self, message: str, *args) -> None:
        # Tokens end up in these messages, only emit them when explicitly asked to
        if self.settings.verbose_debug_mode:
            _LOGGER.debug(message, *args)


class TokenExchanger(ProviderClient):
    """Exchanges authorization codes for access tokens using private_key_jwt."""

    def __init__(
        self,
        settings: IdentitySettings,
        http_session: aiohttp.ClientSession,
        signer: Optional[AssertionSigner] = None,
    ):
        super().__init__(settings, http_session)
        self.signer = signer or AssertionSigner(settings)

    async def _make_token_request(self, token_endpoint: str, form: dict) -> str:
        """Performs the token POST call"""
        try:
            async with self.http_session.post(
                token_endpoint, data=form, timeout=self.timeout
            ) as response:
                await http_raise_for_status(response)
                response_text = await response.text()
                self._log_verbose(
                    "Token response received: Status %s, body: %s",
                    response.status,
                    response_text,
                )
                return response_text
        except HTTPClientError as e:
            _LOGGER.warning("Error exchanging authorization code: %s", e)
            raise TransportError(
                f"Token request failed with status {e.status}",
                status=e.status,
                body=e.body,
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            _LOGGER.warning("Token endpoint %s unreachable: %r", token_endpoint, e)
            raise TransportError(f"Token endpoint unreachable: {e!r}") from e

    async def async_exchange(
        self, code: str, client_id: str, redirect_uri: str, grant_type: str
    ) -> TokenResponse:
        """Triggers the token endpoint to obtain an access token for the code."""
        token_endpoint = self.settings.token_endpoint

        # The assertion audience and the URL posted to come from the same property
        form = {
            "code": code,
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "grant_type": grant_type,
            "client_assertion_type": self.settings.client_assertion_type,
            "client_assertion": self.signer.sign(client_id),
        }

        _LOGGER.debug("Requesting access token from %s", token_endpoint)
        self._log_verbose("Token request form: %s", form)
        response_text = await self._make_token_request(token_endpoint, form)

        try:
            parsed = json.loads(response_text)
        except ValueError as e:
            _LOGGER.error("Token response is not JSON!")
            raise FormatError("Token response not JSON") from e

        if not isinstance(parsed, dict):
            raise FormatError("Token response is not a JSON object")
        return TokenResponse(parsed)


class UserInfoDecoder(ProviderClient):
    """Fetches the userinfo payload and turns it into claims."""

    def __init__(self, settings: IdentitySettings, http_session: aiohttp.ClientSession):
        super().__init__(settings, http_session)
        self._decryption_key: Optional[RSAKey] = None

    def get_decryption_key(self) -> RSAKey:
        """Parses and caches the configured userinfo decryption key."""
        if self._decryption_key is None:
            self._decryption_key = import_private_rsa_key(
                self.settings.jwe_userinfo_private_key, "JWE_USERINFO_PRIVATE_KEY"
            )
        return self._decryption_key

    async def _get_userinfo(self, userinfo_endpoint: str, access_token: str) -> str:
        """Fetches the raw userinfo response body."""
        headers = {"Authorization": "Bearer " + access_token}
        try:
            async with self.http_session.get(
                userinfo_endpoint, headers=headers, timeout=self.timeout
            ) as response:
                await http_raise_for_status(response)
                response_text = await response.text()
                self._log_verbose(
                    "Userinfo response received: Status %s, body: %s",
                    response.status,
                    response_text,
                )
                return response_text
        except HTTPClientError as e:
            _LOGGER.warning("Error fetching userinfo: %s", e)
            raise TransportError(
                f"Userinfo request failed with status {e.status}",
                status=e.status,
                body=e.body,
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            _LOGGER.warning("Userinfo endpoint %s unreachable: %r", userinfo_endpoint, e)
            raise TransportError(f"Userinfo endpoint unreachable: {e!r}") from e

    async def async_fetch(self, access_token: str) -> ClaimsPayload:
        """Fetches userinfo and decrypts/decodes it into claims."""
        userinfo_endpoint = self.settings.userinfo_endpoint

        # Load the key first so a broken configuration fails before any request
        key = self.get_decryption_key() if self.settings.encrypted_userinfo else None

        response = await self._get_userinfo(userinfo_endpoint, access_token)

        if key is not None:
            response = decrypt_envelope(response, key)

        return decode_claims(response)
