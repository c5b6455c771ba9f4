"""Credential store, keeps the users that logged in through eSignet."""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Mapping, Optional, Protocol

from ..types import UserRecord

_LOGGER = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Port for persisting users keyed by their subject identifier.

    Implementations decide the storage format (SQL table, document store, ...).
    """

    async def async_find_by_subject(self, subject: str) -> Optional[UserRecord]:
        """Return the user with the given subject, or None."""
        ...

    async def async_upsert(self, user_data: UserRecord) -> UserRecord:
        """Insert the user or update the existing one with the same subject."""
        ...


def build_user_record(claims: Mapping) -> UserRecord:
    """Maps userinfo claims onto the record handed to the credential store."""
    sub = claims.get("sub")
    if not sub:
        raise ValueError("User subject identifier (sub) is required")

    name = claims.get("name")
    if not name:
        _LOGGER.warning("User name not provided, using fallback")
        name = f"User_{str(sub)[:10]}"

    address = claims.get("address")
    if address is not None and not isinstance(address, str):
        # OIDC address claims are objects (formatted, street_address, ...)
        address = json.dumps(address)

    return UserRecord(
        sub=str(sub),
        name=name,
        email=claims.get("email"),
        phone=claims.get("phone_number") or claims.get("phone"),
        date_of_birth=claims.get("birthdate"),
        address=address,
    )


class MemoryCredentialStore:
    """Holds the users in memory, for development and tests."""

    def __init__(self) -> None:
        self._data: dict[str, UserRecord] = {}
        self._lock = asyncio.Lock()

    def get_data(self) -> dict[str, UserRecord]:
        """Returns the stored users, keyed by subject."""
        return self._data

    async def async_find_by_subject(self, subject: str) -> Optional[UserRecord]:
        """Return the user with the given subject, or None."""
        return self._data.get(subject)

    async def async_upsert(self, user_data: UserRecord) -> UserRecord:
        """Insert the user or update the existing one with the same subject."""
        sub = user_data.get("sub")
        if not sub:
            raise ValueError("User subject identifier (sub) is required")

        now = datetime.now(timezone.utc).isoformat()
        async with self._lock:
            existing = self._data.get(sub)
            record = UserRecord(existing or {})
            record.update(user_data)
            record["created_at"] = existing["created_at"] if existing else now
            record["updated_at"] = now
            self._data[sub] = record

        _LOGGER.debug("User %s %s", sub, "updated" if existing else "created")
        return record
