# comments in English; reST docstrings
from __future__ import annotations

import logging
from dataclasses import dataclass

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authmigrate.services._shared.ports import LegacyCredentialStore, parse_legacy_token

log = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "com.firebase.authentication.credentials"


@dataclass(slots=True)
class RedisLegacyCredentialStore(LegacyCredentialStore):
    """
    Redis-backed legacy credential store.

    Every entry is a field of a single hash named after ``namespace``, the
    same way the legacy SDK kept one preferences file per installation.

    :param r: A Redis client (already connected).
    :param namespace: Name of the hash holding the legacy blobs.
    """

    r: redis.Redis
    namespace: str = DEFAULT_NAMESPACE

    def get(self, storage_key: str) -> str | None:
        try:
            blob = self.r.hget(self.namespace, storage_key)
        except RedisError:
            log.warning("legacy_store.read_failed", exc_info=True)
            return None
        return parse_legacy_token(blob)

    def delete(self, storage_key: str) -> None:
        # HDEL on a missing field returns 0; no error either way
        try:
            self.r.hdel(self.namespace, storage_key)
        except RedisError:
            log.warning("legacy_store.delete_failed", exc_info=True)

    def put(self, storage_key: str, blob: str) -> None:
        self.r.hset(self.namespace, storage_key, blob)
