"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_float(name: str, default: float) -> float:
    """Parse a float from an environment variable, falling back on junk."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` to verify exchanged tokens.
    APP_NAME: str
        Application-identity name; ``"[DEFAULT]"`` maps to the ``default``
        persistence key.
    DATABASE_URL: str
        Backend URL whose leading DNS label names the legacy authority.
    REDIS_URL: str | None
        Redis holding legacy credentials. When unset an in-memory store is
        used (development and tests only).
    LEGACY_CREDENTIALS_NAMESPACE: str
        Redis hash containing the legacy blobs.
    EXCHANGE_ENDPOINT_TEMPLATE: str
        Exchange URL with an ``{authority}`` placeholder.
    EXCHANGE_TIMEOUT_SECONDS: float
        Connect/read timeout for a single exchange call.
    MIGRATION_MAX_WORKERS: int
        Size of the shared worker pool running exchanges.
    MIGRATION_RESULT_TIMEOUT_SECONDS: float
        How long HTTP/CLI callers wait for a migration to resolve.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")

    # Application identity
    APP_NAME = os.getenv("APP_NAME", "[DEFAULT]")
    DATABASE_URL = os.getenv("DATABASE_URL", "https://example.firebaseio.com")

    # Legacy credential storage
    REDIS_URL = os.getenv("REDIS_URL")
    LEGACY_CREDENTIALS_NAMESPACE = os.getenv(
        "LEGACY_CREDENTIALS_NAMESPACE", "com.firebase.authentication.credentials"
    )

    # Exchange authority
    EXCHANGE_ENDPOINT_TEMPLATE = os.getenv(
        "EXCHANGE_ENDPOINT_TEMPLATE", "https://auth.firebase.com/v2/{authority}/sessions"
    )
    EXCHANGE_TIMEOUT_SECONDS = env_float("EXCHANGE_TIMEOUT_SECONDS", 10.0)
    MIGRATION_MAX_WORKERS = int(env_float("MIGRATION_MAX_WORKERS", 4))
    MIGRATION_RESULT_TIMEOUT_SECONDS = env_float("MIGRATION_RESULT_TIMEOUT_SECONDS", 30.0)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Never talks to Redis unless ``TEST_REDIS_URL`` is set.
    - Uses a fixed backend URL so the derived endpoint is predictable.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    REDIS_URL = os.getenv("TEST_REDIS_URL")
    DATABASE_URL = "https://test-app.firebaseio.com"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    MIGRATION_MAX_WORKERS = 2
    MIGRATION_RESULT_TIMEOUT_SECONDS = 5.0
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled while relying on WSGI-level log configuration for
    noise control.
    """

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
