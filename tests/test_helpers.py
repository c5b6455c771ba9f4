"""Tests for the helpers and validation tools"""

import base64
import json
import re

import pytest

from esignet_rp.tools.helpers import (
    base36_encode,
    base64url_encode,
    generate_unique_id,
    parse_jwk,
)
from esignet_rp.tools.validation import (
    sanitize_base_url,
    validate_client_id,
    validate_url,
)


def test_validate_url():
    """Test the URL validation."""
    assert validate_url("https://esignet.example.com")
    assert validate_url("http://localhost:8088/v1/esignet")
    assert not validate_url("esignet.example.com")
    assert not validate_url("ftp://esignet.example.com")
    assert not validate_url("")
    assert not validate_url(None)


def test_sanitize_base_url():
    """Test trailing slashes and whitespace are removed."""
    assert sanitize_base_url(" https://example.com/v1/esignet/ ") == (
        "https://example.com/v1/esignet"
    )
    assert sanitize_base_url("https://example.com//") == "https://example.com"
    assert sanitize_base_url(None) == ""


def test_validate_client_id():
    """Test the client ID validation."""
    assert validate_client_id("rp-1")
    assert not validate_client_id("")
    assert not validate_client_id("   ")
    assert not validate_client_id(None)
    assert not validate_client_id(123)


def test_base36_encode():
    """Test the base 36 encoding of timestamps."""
    assert base36_encode(0) == "0"
    assert base36_encode(35) == "z"
    assert base36_encode(36) == "10"
    assert base36_encode(1295) == "zz"
    assert base36_encode(46656) == "1000"


def test_generate_unique_id():
    """Test generated identifiers are URL safe and do not repeat."""
    ids = {generate_unique_id() for _ in range(50)}
    assert len(ids) == 50
    for value in ids:
        assert re.fullmatch(r"[A-Za-z0-9_-]+", value)

    # 16 random bytes encode to 22 characters, the timestamp follows
    assert len(base64url_encode(b"\x00" * 16)) == 22
    assert len(generate_unique_id()) > 22


def test_parse_jwk_formats():
    """Test a JWK can be given as dict, JSON, base64 and base64url."""
    jwk = {"kty": "RSA", "n": "abc", "e": "AQAB"}
    text = json.dumps(jwk)

    assert parse_jwk(jwk) == jwk
    assert parse_jwk(text) == jwk
    assert parse_jwk(text.encode()) == jwk
    assert parse_jwk(base64.b64encode(text.encode()).decode()) == jwk
    assert (
        parse_jwk(base64.urlsafe_b64encode(text.encode()).decode().rstrip("=")) == jwk
    )


@pytest.mark.parametrize("value", [None, "", "   ", 42, "%%%not-base64%%%", "WzEsMl0="])
def test_parse_jwk_invalid(value):
    """Test values that are no JWK object are rejected."""
    with pytest.raises(ValueError):
        parse_jwk(value)
