"""
authmigrate.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) that define the contracts
the migration coordinator relies on.

These ports decouple the service layer from concrete storage, identity
and transport implementations.

Modules
-------
- :mod:`legacy_credential_store`:
    Defines :class:`~.LegacyCredentialStore`: read/delete access to tokens
    written by the legacy SDK, plus an in-memory double.

- :mod:`session_provider`:
    Defines :class:`~.SessionProvider`: the identity provider owning the
    current session, plus a deterministic stub.

- :mod:`exchange_client`:
    Defines :class:`~.ExchangeClient`: the legacy-to-current token exchange.

Design Notes
------------
Concrete adapters (Redis, JWT, ``requests``) implement these interfaces
under ``authmigrate.infra``.
"""

from __future__ import annotations

from .exchange_client import ExchangeClient
from .legacy_credential_store import (
    InMemoryLegacyCredentialStore,
    LegacyCredentialStore,
    parse_legacy_token,
)
from .session_provider import SessionProvider, StubSessionProvider

__all__ = [
    "LegacyCredentialStore",
    "InMemoryLegacyCredentialStore",
    "parse_legacy_token",
    "SessionProvider",
    "StubSessionProvider",
    "ExchangeClient",
]
