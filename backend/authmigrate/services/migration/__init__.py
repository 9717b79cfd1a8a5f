"""Legacy session migration: coordinator, registry, app contexts and DTOs."""

from __future__ import annotations

from .context import (
    DEFAULT_APP_NAME,
    DEFAULT_PERSISTENCE_KEY,
    AppContext,
    delete_app,
    get_app,
    initialize_app,
)
from .dto import (
    ExchangeFailure,
    ExchangeOutcome,
    ExchangeSuccess,
    FailureKind,
    MigrationResult,
    MigrationStatus,
    RejectionKind,
    Session,
)
from .registry import InstanceRegistry
from .service import MigrationCoordinator

__all__ = [
    "MigrationCoordinator",
    "InstanceRegistry",
    # App contexts
    "AppContext",
    "DEFAULT_APP_NAME",
    "DEFAULT_PERSISTENCE_KEY",
    "initialize_app",
    "get_app",
    "delete_app",
    # DTOs
    "Session",
    "FailureKind",
    "ExchangeSuccess",
    "ExchangeFailure",
    "ExchangeOutcome",
    "MigrationStatus",
    "RejectionKind",
    "MigrationResult",
]
