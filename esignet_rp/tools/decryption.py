"""Ordered decryption strategies for JWE encrypted userinfo responses.

Providers wrap the userinfo ciphertext differently (RFC 7516 section 7): as a
compact serialization, as a flattened JSON serialization or as a general JSON
serialization with a recipients list. The envelope does not reliably declare its
shape before decryption is attempted, so the serializations are tried in a fixed
order and the first one that decrypts wins.
"""

import json
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from joserfc import jwe
from joserfc.errors import JoseError
from joserfc.jwk import RSAKey

from ..config.const import USERINFO_JWE_ALGORITHMS
from .exceptions import DecryptionError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecryptionAttempt:
    """Outcome of one strategy, carrying either the plaintext or the error."""

    name: str
    plaintext: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.plaintext is not None


@dataclass(frozen=True)
class DecryptionStrategy:
    """A named way of decrypting an envelope."""

    name: str
    decrypt: Callable[[str, RSAKey], bytes]

    def attempt(self, envelope: str, key: RSAKey) -> DecryptionAttempt:
        """Runs the strategy, capturing library failures as an attempt result."""
        try:
            plaintext = self.decrypt(envelope, key).decode("utf-8")
            return DecryptionAttempt(self.name, plaintext=plaintext)
        except (JoseError, ValueError, TypeError, KeyError) as e:
            return DecryptionAttempt(self.name, error=e)


def _load_json_envelope(envelope: str) -> dict:
    data = json.loads(envelope)
    if not isinstance(data, dict):
        raise ValueError("JWE JSON serialization must be an object")
    return data


def decrypt_compact(envelope: str, key: RSAKey) -> bytes:
    """Decrypts a single recipient compact serialization."""
    obj = jwe.decrypt_compact(envelope.strip(), key, algorithms=USERINFO_JWE_ALGORITHMS)
    return obj.plaintext


def decrypt_flattened_json(envelope: str, key: RSAKey) -> bytes:
    """Decrypts a single recipient flattened JSON serialization."""
    data = _load_json_envelope(envelope)
    if "recipients" in data:
        raise ValueError("envelope is a general JSON serialization")

    obj = jwe.decrypt_json(data, key, algorithms=USERINFO_JWE_ALGORITHMS)
    return obj.plaintext


def decrypt_general_json(envelope: str, key: RSAKey) -> bytes:
    """Decrypts a general (multi recipient) JSON serialization."""
    data = _load_json_envelope(envelope)
    if "recipients" not in data:
        raise ValueError("envelope has no recipients")

    obj = jwe.decrypt_json(data, key, algorithms=USERINFO_JWE_ALGORITHMS)
    return obj.plaintext


DEFAULT_STRATEGIES: tuple[DecryptionStrategy, ...] = (
    DecryptionStrategy("compact", decrypt_compact),
    DecryptionStrategy("flattened_json", decrypt_flattened_json),
    DecryptionStrategy("general_json", decrypt_general_json),
)


def decrypt_envelope(
    envelope: str,
    key: RSAKey,
    strategies: Sequence[DecryptionStrategy] = DEFAULT_STRATEGIES,
) -> str:
    """Decrypts the envelope with the first strategy that succeeds.

    Raises DecryptionError with every attempt if none of them succeed.
    """
    attempts = []
    for strategy in strategies:
        attempt = strategy.attempt(envelope, key)
        if attempt.succeeded:
            _LOGGER.debug("Userinfo response decrypted as %s JWE", attempt.name)
            return attempt.plaintext

        _LOGGER.debug(
            "Userinfo response is not a decryptable %s JWE: %s",
            attempt.name,
            attempt.error,
        )
        attempts.append(attempt)

    _LOGGER.warning(
        "Userinfo response could not be decrypted, tried: %s",
        ", ".join(attempt.name for attempt in attempts),
    )
    raise DecryptionError(attempts)
