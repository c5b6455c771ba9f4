"""Relying party integration for eSignet.

Exchanges authorization codes for verified identity claims: signs the client
assertion, performs the token exchange and decrypts/decodes the userinfo response.
"""

__version__ = "0.1.0"

from .app import create_app
from .config.settings import IdentitySettings, load_settings
from .flow import IdentityFlow
from .stores.credential_store import (
    CredentialStore,
    MemoryCredentialStore,
    build_user_record,
)
from .tools.assertion import AssertionSigner
from .tools.exceptions import (
    ConfigurationError,
    DecryptionError,
    FormatError,
    IdentityFlowException,
    ProviderError,
    TransportError,
)
from .tools.oidc_client import TokenExchanger, UserInfoDecoder, decode_claims
from .types import ClaimsPayload, TokenResponse, UserRecord

__all__ = [
    "__version__",
    # configuration
    "IdentitySettings",
    "load_settings",
    # components
    "AssertionSigner",
    "TokenExchanger",
    "UserInfoDecoder",
    "IdentityFlow",
    "create_app",
    "decode_claims",
    # stores
    "CredentialStore",
    "MemoryCredentialStore",
    "build_user_record",
    # types
    "ClaimsPayload",
    "TokenResponse",
    "UserRecord",
    # exceptions
    "IdentityFlowException",
    "ConfigurationError",
    "TransportError",
    "ProviderError",
    "DecryptionError",
    "FormatError",
]
