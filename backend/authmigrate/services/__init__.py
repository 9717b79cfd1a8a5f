"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`authmigrate.services` without knowing internal structure.

Re-exports
----------
- Migration (from ``authmigrate.services.migration``)
    * :class:`MigrationCoordinator`
    * :class:`InstanceRegistry`
    * :class:`AppContext` plus :func:`initialize_app` / :func:`get_app`
    * DTOs: :class:`MigrationResult`, :class:`MigrationStatus`,
      :class:`RejectionKind`, :class:`Session`

- Shared errors (from ``authmigrate.services._shared.errors``)
    * :class:`ServiceError`, :class:`ConfigurationError`, :class:`SignInError`
"""

from __future__ import annotations

from ._shared.errors import ConfigurationError, ServiceError, SignInError
from .migration import (
    AppContext,
    InstanceRegistry,
    MigrationCoordinator,
    MigrationResult,
    MigrationStatus,
    RejectionKind,
    Session,
    get_app,
    initialize_app,
)

__all__ = [
    # Errors
    "ServiceError",
    "ConfigurationError",
    "SignInError",
    # Migration
    "MigrationCoordinator",
    "InstanceRegistry",
    "AppContext",
    "initialize_app",
    "get_app",
    "MigrationResult",
    "MigrationStatus",
    "RejectionKind",
    "Session",
]
