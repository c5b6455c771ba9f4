"""Helper functions for the identity flow."""

import base64
import binascii
import json
import os
import time
from typing import Any


def base64url_encode(value: bytes) -> str:
    """Uses base64url encoding on a given byte string"""
    return base64.urlsafe_b64encode(value).rstrip(b"=").decode("utf-8")


def base36_encode(value: int) -> str:
    """Encodes a non-negative integer in base 36 (0-9a-z)."""
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"

    out = []
    while value:
        value, remainder = divmod(value, 36)
        out.append(digits[remainder])
    return "".join(reversed(out))


def generate_unique_id(length: int = 16) -> str:
    """Generates a random URL safe string suffixed with the current time in base 36."""
    return base64url_encode(os.urandom(length)) + base36_encode(
        int(time.time() * 1000)
    )


def parse_jwk(value: Any) -> dict:
    """Parses a JWK given as dict, JSON text or base64 encoded JSON text.

    Raises ValueError when the value cannot be interpreted as a JWK object.
    """
    if isinstance(value, dict):
        return value

    if isinstance(value, bytes):
        value = value.decode("utf-8")

    if not isinstance(value, str) or not value.strip():
        raise ValueError("JWK must be a dict or a non-empty string")

    text = value.strip()
    if not text.startswith("{"):
        # Keys distributed through env vars are commonly base64 encoded
        text = text.replace("-", "+").replace("_", "/")
        try:
            text = base64.b64decode(text + "=" * (-len(text) % 4)).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError("JWK is neither JSON nor base64 encoded JSON") from e

    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("JWK must decode to a JSON object")
    return parsed
