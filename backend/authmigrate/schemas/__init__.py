"""Convenience exports for application schemas."""

from __future__ import annotations

from .migration import (
    LegacyCredentialStatusSchema,
    MigrateRequestSchema,
    MigrationResultSchema,
    PersistenceKeyQuerySchema,
    SessionSchema,
)

__all__ = [
    "MigrateRequestSchema",
    "PersistenceKeyQuerySchema",
    "MigrationResultSchema",
    "SessionSchema",
    "LegacyCredentialStatusSchema",
]
