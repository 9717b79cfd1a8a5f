"""Global pytest fixtures for the authmigrate service."""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest
from flask import Flask

os.environ.setdefault("APP_ENV", "testing")

from authmigrate import create_app  # noqa: E402
from authmigrate.core.config import TestingConfig  # noqa: E402
from authmigrate.core.extensions import get_migration_app, get_registry  # noqa: E402
from authmigrate.services._shared.ports import (  # noqa: E402
    InMemoryLegacyCredentialStore,
    StubSessionProvider,
)
from authmigrate.services.migration import AppContext  # noqa: E402

from tests.helpers.auth import issue_token  # noqa: E402


# ------------------------------ Service layer ----------------------------- #


@pytest.fixture()
def executor() -> Generator[ThreadPoolExecutor, None, None]:
    """Worker pool standing in for the registry-owned one."""
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="test-exchange")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture()
def store() -> InMemoryLegacyCredentialStore:
    return InMemoryLegacyCredentialStore()


@pytest.fixture()
def sessions() -> StubSessionProvider:
    return StubSessionProvider()


@pytest.fixture()
def make_app_context(
    store: InMemoryLegacyCredentialStore, sessions: StubSessionProvider
) -> Callable[..., AppContext]:
    """Factory for app contexts sharing the default store and session doubles."""

    def _factory(
        name: str = "[DEFAULT]", database_url: str = "https://test-app.firebaseio.com"
    ) -> AppContext:
        return AppContext(
            name=name,
            database_url=database_url,
            session_provider=sessions,
            credential_store=store,
        )

    return _factory


# ------------------------------- Flask app -------------------------------- #


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Returns
    -------
    Generator[Flask, None, None]
        Application with an in-memory legacy store; its worker pool is shut
        down after the test.
    """
    application = create_app(TestingConfig)
    with application.app_context():
        yield application
    get_registry(application).shutdown(wait=True)


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def app_store(app: Flask) -> InMemoryLegacyCredentialStore:
    """Legacy store wired into ``app``."""
    store = get_migration_app(app).credential_store
    assert isinstance(store, InMemoryLegacyCredentialStore)
    return store


@pytest.fixture()
def exchanged_token(app: Flask) -> str:
    """A JWT the exchange authority would hand back for user ``42``."""
    with app.app_context():
        return issue_token("42")
