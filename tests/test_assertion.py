"""Tests for the client assertion signer"""

import json

import pytest
from joserfc import jwt
from joserfc.jwk import RSAKey

from esignet_rp.tools.assertion import AssertionSigner, import_private_rsa_key
from esignet_rp.tools.exceptions import ConfigurationError

from .mocks.esignet_server import (
    TOKEN_URL,
    MockEsignetServer,
    encode_jwk_b64,
    generate_rsa_key,
)


def _public(key: RSAKey) -> RSAKey:
    return RSAKey.import_key(key.as_dict(private=False))


def test_sign_client_assertion():
    """Test the assertion is self-issued, addressed to the token endpoint and short lived."""
    server = MockEsignetServer()
    signer = AssertionSigner(server.settings())

    assertion = signer.sign("rp-1")
    token = jwt.decode(assertion, _public(server.client_key), algorithms=["RS256"])

    assert token.header["alg"] == "RS256"
    assert token.header["typ"] == "JWT"
    assert token.header["kid"] == "client"

    claims = token.claims
    assert claims["iss"] == "rp-1"
    assert claims["sub"] == "rp-1"
    assert claims["aud"] == TOKEN_URL
    assert claims["exp"] - claims["iat"] == 300
    assert claims["jti"]


def test_sign_uses_fresh_identifiers():
    """Test two assertions never share a jti."""
    server = MockEsignetServer()
    signer = AssertionSigner(server.settings())
    public_key = _public(server.client_key)

    first = jwt.decode(signer.sign("rp-1"), public_key).claims
    second = jwt.decode(signer.sign("rp-1"), public_key).claims
    assert first["jti"] != second["jti"]


def test_sign_audience_follows_service_url():
    """Test the audience tracks the configured base URL, without double slashes."""
    server = MockEsignetServer()
    signer = AssertionSigner(
        server.settings(esignet_service_url="https://idp.example.org/v1/esignet/")
    )

    claims = jwt.decode(signer.sign("rp-1"), _public(server.client_key)).claims
    assert claims["aud"] == "https://idp.example.org/v1/esignet/oauth/v2/token"


@pytest.mark.parametrize(
    "key_value",
    [
        lambda key: key.as_dict(private=True),
        lambda key: json.dumps(key.as_dict(private=True)),
        encode_jwk_b64,
    ],
)
def test_sign_accepts_key_encodings(key_value):
    """Test the signing key can be configured as dict, JSON or base64 JSON."""
    server = MockEsignetServer()
    signer = AssertionSigner(
        server.settings(client_private_key=key_value(server.client_key))
    )

    claims = jwt.decode(signer.sign("rp-1"), _public(server.client_key)).claims
    assert claims["iss"] == "rp-1"


def test_sign_requires_client_id():
    """Test an empty client_id is refused."""
    signer = AssertionSigner(MockEsignetServer().settings())

    with pytest.raises(ConfigurationError):
        signer.sign("")


def test_sign_missing_key():
    """Test a missing signing key is a configuration error."""
    signer = AssertionSigner(MockEsignetServer().settings(client_private_key=None))

    with pytest.raises(ConfigurationError) as excinfo:
        signer.sign("rp-1")
    assert str(excinfo.value) == "CLIENT_PRIVATE_KEY is not configured"


def test_import_private_rsa_key_errors():
    """Test unusable keys are reported with the setting name."""
    key = generate_rsa_key("client", "sig")

    with pytest.raises(ConfigurationError) as excinfo:
        import_private_rsa_key(key.as_dict(private=False), "CLIENT_PRIVATE_KEY")
    assert "must contain a private key" in str(excinfo.value)

    with pytest.raises(ConfigurationError) as excinfo:
        import_private_rsa_key("not a key", "CLIENT_PRIVATE_KEY")
    assert "not a valid RSA JWK" in str(excinfo.value)

    with pytest.raises(ConfigurationError):
        import_private_rsa_key({"kty": "oct", "k": "c2VjcmV0"}, "CLIENT_PRIVATE_KEY")

    assert import_private_rsa_key(key.as_dict(private=True), "X").is_private
