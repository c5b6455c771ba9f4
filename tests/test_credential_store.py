"""Tests for the credential store"""

import json

import pytest

from esignet_rp.stores.credential_store import MemoryCredentialStore, build_user_record
from esignet_rp.types import UserRecord


def test_build_user_record():
    """Test claims are mapped onto the stored user fields."""
    record = build_user_record(
        {
            "sub": "S-1",
            "name": "Alice",
            "email": "alice@example.com",
            "phone_number": "+94771234567",
            "birthdate": "1990-01-01",
            "address": {"locality": "Colombo", "country": "LK"},
        }
    )

    assert record["sub"] == "S-1"
    assert record["name"] == "Alice"
    assert record["email"] == "alice@example.com"
    assert record["phone"] == "+94771234567"
    assert record["date_of_birth"] == "1990-01-01"
    assert json.loads(record["address"]) == {"locality": "Colombo", "country": "LK"}


def test_build_user_record_fallbacks():
    """Test the name fallback and the legacy phone claim."""
    record = build_user_record({"sub": "1234567890123", "phone": "+100"})

    assert record["name"] == "User_1234567890"
    assert record["phone"] == "+100"
    assert record["email"] is None
    assert record["address"] is None


def test_build_user_record_requires_subject():
    """Test a record cannot be built without a subject."""
    with pytest.raises(ValueError):
        build_user_record({"name": "Alice"})


@pytest.mark.asyncio
async def test_memory_store_upsert():
    """Test inserting and then updating a user."""
    store = MemoryCredentialStore()
    assert await store.async_find_by_subject("S-1") is None

    created = await store.async_upsert(UserRecord(sub="S-1", name="Alice"))
    assert created["created_at"] == created["updated_at"]

    updated = await store.async_upsert(
        UserRecord(sub="S-1", name="Alice", email="alice@example.com")
    )
    assert updated["created_at"] == created["created_at"]
    assert updated["email"] == "alice@example.com"
    assert updated["updated_at"] >= created["updated_at"]

    assert store.get_data() == {"S-1": updated}
    assert await store.async_find_by_subject("S-1") == updated


@pytest.mark.asyncio
async def test_memory_store_requires_subject():
    """Test users without subject are refused."""
    store = MemoryCredentialStore()

    with pytest.raises(ValueError):
        await store.async_upsert(UserRecord(name="Alice"))
    assert store.get_data() == {}
