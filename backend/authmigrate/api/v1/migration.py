"""Legacy session migration endpoints."""

from __future__ import annotations

from concurrent.futures import TimeoutError as FutureTimeoutError

from flask import Blueprint, current_app

from authmigrate.api.deps import json_response, load_json, load_query, timing
from authmigrate.core.errors import MigrationTimeout
from authmigrate.core.extensions import get_migrator
from authmigrate.schemas import (
    LegacyCredentialStatusSchema,
    MigrateRequestSchema,
    MigrationResultSchema,
    PersistenceKeyQuerySchema,
)

bp = Blueprint("migration", __name__)

migrate_schema = MigrateRequestSchema()
query_schema = PersistenceKeyQuerySchema()
result_schema = MigrationResultSchema()
status_schema = LegacyCredentialStatusSchema()


@bp.post("")
@timing
def migrate():
    """Run the migration for one persistence key and return its terminal state."""

    data = load_json(migrate_schema)
    migrator = get_migrator()
    future = migrator.migrate(data["persistence_key"])
    try:
        result = future.result(timeout=current_app.config["MIGRATION_RESULT_TIMEOUT_SECONDS"])
    except FutureTimeoutError as exc:
        # The job keeps running; its side effects still apply.
        raise MigrationTimeout() from exc
    return json_response({"data": result_schema.dump(result)})


@bp.get("/legacy")
@timing
def legacy_status():
    """Report whether a legacy credential is stored for the slot."""

    data = load_query(query_schema)
    migrator = get_migrator()
    key = data["persistence_key"]
    if key is None:
        key = migrator.default_persistence_key
    body = {
        "persistence_key": key,
        "storage_key": migrator.storage_key(key),
        "has_legacy_credential": migrator.has_legacy_credential(key),
    }
    return json_response({"data": status_schema.dump(body)})


@bp.delete("/legacy")
@timing
def legacy_clear():
    """Remove the legacy credential for the slot (idempotent)."""

    data = load_query(query_schema)
    get_migrator().clear_legacy_credential(data["persistence_key"])
    return "", 204


@bp.delete("/session")
@timing
def sign_out():
    """End the current session so another slot can be migrated (idempotent)."""

    get_migrator().sign_out()
    return "", 204
