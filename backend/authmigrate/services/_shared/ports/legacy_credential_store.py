from __future__ import annotations

import json
import threading
from typing import Protocol


class LegacyCredentialStore(Protocol):
    """
    Local storage holding credentials written by the legacy SDK.

    Entries are addressed by a *storage key* (``"<authority host>/<persistence key>"``)
    and hold an opaque JSON blob of which only the ``token`` field is read.

    Implementations never raise for missing or malformed data, nor for local
    I/O faults: those resolve to "absent".
    """

    def get(self, storage_key: str) -> str | None:
        """Return the legacy token stored under ``storage_key`` (if any)."""

    def delete(self, storage_key: str) -> None:
        """Remove the entry. Idempotent: deleting an absent key is a no-op."""

    def put(self, storage_key: str, blob: str) -> None:
        """Write a raw legacy blob. Only used for seeding; never by migration."""


def parse_legacy_token(blob: str | bytes | None) -> str | None:
    """
    Extract the ``token`` field from a stored legacy blob.

    :param blob: Raw JSON blob as written by the legacy SDK.
    :returns: The token, or ``None`` when the blob is missing or malformed.
    """
    if blob is None:
        return None
    try:
        data = json.loads(blob)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    token = data.get("token")
    if not isinstance(token, str) or not token:
        return None
    return token


class InMemoryLegacyCredentialStore(LegacyCredentialStore):
    """
    In-memory legacy store.

    .. note::
       Uses a threading lock so single-entry reads/deletes are atomic, like
       the real backends.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, storage_key: str) -> str | None:
        with self._lock:
            blob = self._blobs.get(storage_key)
        return parse_legacy_token(blob)

    def delete(self, storage_key: str) -> None:
        with self._lock:
            self._blobs.pop(storage_key, None)

    def put(self, storage_key: str, blob: str) -> None:
        with self._lock:
            self._blobs[storage_key] = blob

    def __contains__(self, storage_key: object) -> bool:
        with self._lock:
            return storage_key in self._blobs
