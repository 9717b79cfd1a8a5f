"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authmigrate.infra.http.exchange_client import RequestsExchangeClient
from authmigrate.infra.jwt.jwt_session_provider import JWTSessionProvider
from authmigrate.infra.redis.redis_legacy_credential_store import RedisLegacyCredentialStore
from authmigrate.services._shared.ports import InMemoryLegacyCredentialStore, LegacyCredentialStore
from authmigrate.services.migration import (
    AppContext,
    InstanceRegistry,
    MigrationCoordinator,
    initialize_app,
)

# Global singletons (import-safe)
jwt = JWTManager()
redis_client: redis.Redis | None = None

APP_CONTEXT_KEY = "migration_app"
REGISTRY_KEY = "migration_registry"


def _build_credential_store(app: Flask) -> LegacyCredentialStore:
    """Return the Redis store when ``REDIS_URL`` is set, else an in-memory one."""
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        app.logger.warning("REDIS_URL not set; legacy credentials kept in memory")
        return InMemoryLegacyCredentialStore()

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client
    return RedisLegacyCredentialStore(
        r=redis_client,
        namespace=app.config["LEGACY_CREDENTIALS_NAMESPACE"],
    )


def init_app(app: Flask) -> None:
    """Initialize JWT, Redis and the migration wiring.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. Registers the
        application-identity context named ``APP_NAME`` and a migration
        registry owning the shared exchange client and worker pool.

    Notes
    -----
    The coordinator itself is created lazily, so a bad ``DATABASE_URL``
    surfaces as a ``ConfigurationError`` to the first caller asking for it.
    """
    jwt.init_app(app)

    store = _build_credential_store(app)
    app.extensions[APP_CONTEXT_KEY] = initialize_app(
        name=app.config["APP_NAME"],
        database_url=app.config["DATABASE_URL"],
        session_provider=JWTSessionProvider(app),
        credential_store=store,
    )
    app.extensions[REGISTRY_KEY] = InstanceRegistry(
        exchange_client=RequestsExchangeClient(timeout=app.config["EXCHANGE_TIMEOUT_SECONDS"]),
        endpoint_template=app.config["EXCHANGE_ENDPOINT_TEMPLATE"],
        max_workers=app.config["MIGRATION_MAX_WORKERS"],
    )


def get_migration_app(app: Flask | None = None) -> AppContext:
    """Return the application-identity context bound to ``app`` (or ``current_app``)."""
    flask_app = app or current_app
    return cast(AppContext, flask_app.extensions[APP_CONTEXT_KEY])


def get_registry(app: Flask | None = None) -> InstanceRegistry:
    """Return the migration registry bound to ``app`` (or ``current_app``)."""
    flask_app = app or current_app
    return cast(InstanceRegistry, flask_app.extensions[REGISTRY_KEY])


def get_migrator(app: Flask | None = None) -> MigrationCoordinator:
    """Return the coordinator for the Flask app's identity context."""
    return get_registry(app).get_instance(get_migration_app(app))
