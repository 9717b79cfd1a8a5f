# tests/unit/infra/test_redis_legacy_credential_store.py
"""
Unit tests for RedisLegacyCredentialStore using fakeredis.

Flows:
- put + get through the namespace hash
- delete (present and absent keys)
- malformed blobs read as absent
- Redis faults on read/delete resolve to "absent" without raising
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import fakeredis
import pytest
from authmigrate.infra.redis.redis_legacy_credential_store import (
    DEFAULT_NAMESPACE,
    RedisLegacyCredentialStore,
)
from redis.exceptions import ConnectionError as RedisConnectionError

KEY = "my-app.firebaseio.com/default"


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    return RedisLegacyCredentialStore(r=fake_redis)


def test_get_reads_token_field_from_namespace_hash(store, fake_redis):
    store.put(KEY, json.dumps({"token": "legacy-1", "provider": "password"}))

    assert fake_redis.hexists(DEFAULT_NAMESPACE, KEY)
    assert store.get(KEY) == "legacy-1"


def test_get_missing_key_is_none(store):
    assert store.get(KEY) is None


@pytest.mark.parametrize(
    "blob",
    ["{not json", json.dumps({"uid": "u1"}), json.dumps({"token": ""}), json.dumps(["legacy"])],
)
def test_malformed_blob_reads_as_absent(store, blob):
    store.put(KEY, blob)

    assert store.get(KEY) is None


def test_delete_is_idempotent(store, fake_redis):
    store.put(KEY, json.dumps({"token": "legacy-1"}))

    store.delete(KEY)
    store.delete(KEY)

    assert store.get(KEY) is None
    assert not fake_redis.hexists(DEFAULT_NAMESPACE, KEY)


def test_delete_touches_only_its_key(store):
    other = "my-app.firebaseio.com/other"
    store.put(KEY, json.dumps({"token": "legacy-1"}))
    store.put(other, json.dumps({"token": "legacy-2"}))

    store.delete(KEY)

    assert store.get(other) == "legacy-2"


def test_custom_namespace_is_isolated(fake_redis):
    default = RedisLegacyCredentialStore(r=fake_redis)
    custom = RedisLegacyCredentialStore(r=fake_redis, namespace="other.namespace")
    custom.put(KEY, json.dumps({"token": "legacy-1"}))

    assert default.get(KEY) is None
    assert custom.get(KEY) == "legacy-1"


def test_redis_faults_resolve_to_absent():
    broken = MagicMock()
    broken.hget.side_effect = RedisConnectionError("down")
    broken.hdel.side_effect = RedisConnectionError("down")
    store = RedisLegacyCredentialStore(r=broken)

    assert store.get(KEY) is None
    store.delete(KEY)  # no raise
    broken.hdel.assert_called_once_with(DEFAULT_NAMESPACE, KEY)
