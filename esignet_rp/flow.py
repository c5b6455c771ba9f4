"""Identity flow, turns an authorization code into verified userinfo claims."""

import asyncio
import logging
import ssl
from functools import partial
from typing import Optional

import aiohttp

from .config.const import DEFAULT_GRANT_TYPE
from .config.settings import IdentitySettings
from .stores.credential_store import CredentialStore, build_user_record
from .tools.assertion import AssertionSigner
from .tools.exceptions import FormatError, ProviderError
from .tools.oidc_client import TokenExchanger, UserInfoDecoder
from .types import ClaimsPayload

_LOGGER = logging.getLogger(__name__)


# pylint: disable=too-many-instance-attributes
class IdentityFlow:
    """Completes eSignet logins: token exchange, userinfo and user bookkeeping."""

    def __init__(
        self,
        settings: IdentitySettings,
        credential_store: Optional[CredentialStore] = None,
        **kwargs,
    ):
        self.settings = settings
        self.credential_store = credential_store

        # Optional collaborators, created on first use when not injected
        self.http_session: Optional[aiohttp.ClientSession] = kwargs.get("http_session")
        self.token_exchanger: Optional[TokenExchanger] = kwargs.get("token_exchanger")
        self.userinfo_decoder: Optional[UserInfoDecoder] = kwargs.get(
            "userinfo_decoder"
        )
        self.signer = kwargs.get("signer") or AssertionSigner(settings)
        self._owns_http_session = False

        if self.settings.verbose_debug_mode:
            _LOGGER.warning(
                "VERBOSE_DEBUG_MODE is enabled so token request and response "
                + "logging is active. Do NOT leave this enabled in production!"
            )

    async def _get_http_session(self) -> aiohttp.ClientSession:
        """Create or get the existing client session with custom networking/TLS options"""
        if self.http_session is not None:
            return self.http_session

        _LOGGER.debug(
            "Creating HTTP session with options: "
            + "verify certificates: %r, custom CA file: %s, timeout: %ss",
            self.settings.tls_verify,
            self.settings.tls_ca_path,
            self.settings.request_timeout,
        )

        tcp_connector_args = {}
        if not self.settings.tls_verify:
            tcp_connector_args["ssl"] = False
        elif self.settings.tls_ca_path:
            # Loading the CA file blocks, keep it off the event loop
            ssl_context = await asyncio.get_running_loop().run_in_executor(
                None, partial(ssl.create_default_context, cafile=self.settings.tls_ca_path)
            )
            tcp_connector_args["ssl"] = ssl_context

        self.http_session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(**tcp_connector_args),
            timeout=aiohttp.ClientTimeout(total=self.settings.request_timeout),
        )
        self._owns_http_session = True
        return self.http_session

    async def _get_token_exchanger(self) -> TokenExchanger:
        if self.token_exchanger is None:
            session = await self._get_http_session()
            self.token_exchanger = TokenExchanger(self.settings, session, self.signer)
        return self.token_exchanger

    async def _get_userinfo_decoder(self) -> UserInfoDecoder:
        if self.userinfo_decoder is None:
            session = await self._get_http_session()
            self.userinfo_decoder = UserInfoDecoder(self.settings, session)
        return self.userinfo_decoder

    async def async_close(self) -> None:
        """Closes the HTTP session if this flow created it."""
        if self.http_session is not None and self._owns_http_session:
            _LOGGER.debug("Closing HTTP session")
            await self.http_session.close()
            self.http_session = None
            self._owns_http_session = False

    async def _async_save_user(self, claims: ClaimsPayload) -> None:
        """Hands the claims to the credential store, never raising."""
        if self.credential_store is None:
            return

        try:
            user = await self.credential_store.async_upsert(build_user_record(claims))
            _LOGGER.debug("User saved to credential store: %s", user.get("sub"))
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Bookkeeping only, the login itself has already been verified
            _LOGGER.warning(
                "Saving user %s failed, continuing with user info: %s",
                claims.get("sub"),
                e,
            )

    async def async_complete_login(
        self,
        code: str,
        client_id: str,
        redirect_uri: str,
        grant_type: str = DEFAULT_GRANT_TYPE,
    ) -> ClaimsPayload:
        """Exchanges the code and returns the user's claims.

        Raises ConfigurationError, TransportError, ProviderError, DecryptionError
        or FormatError. Credential store failures are only logged.
        """
        self.settings.check_minimum_config()

        exchanger = await self._get_token_exchanger()
        decoder = await self._get_userinfo_decoder()

        # The code is single use, broken keys must surface before it is sent
        exchanger.signer.get_signing_key()
        if self.settings.encrypted_userinfo:
            decoder.get_decryption_key()

        token_response = await exchanger.async_exchange(
            code, client_id, redirect_uri, grant_type
        )

        if token_response.get("error"):
            _LOGGER.warning(
                "Token could not be obtained for client %s: %s",
                client_id,
                token_response.get("error"),
            )
            raise ProviderError(
                token_response["error"],
                token_response.get("error_description"),
                response=dict(token_response),
            )

        access_token = token_response.get("access_token")
        if not access_token:
            raise FormatError("Token response did not contain an access_token")

        claims = await decoder.async_fetch(access_token)

        # The subject is the canonical identifier, without it nobody was identified
        if not claims.get("sub"):
            raise FormatError("Userinfo claims do not contain a subject (sub)")

        await self._async_save_user(claims)

        _LOGGER.debug(
            "Obtained user details from eSignet for subject %s", claims.get("sub")
        )
        return claims
