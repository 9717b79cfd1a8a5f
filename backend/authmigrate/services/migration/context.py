"""
Application-identity contexts.

An :class:`AppContext` binds together everything a migration coordinator needs
to know about one application: its name (which yields the default persistence
key), the backend host configuration the exchange endpoint is derived from,
and the collaborators scoped to that application (session provider and legacy
credential store).

A small process-wide table keeps named contexts alive until they are deleted;
:data:`DEFAULT_APP_NAME` designates the default one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Final

from authmigrate.services._shared.errors import ConfigurationError
from authmigrate.services._shared.ports.legacy_credential_store import LegacyCredentialStore
from authmigrate.services._shared.ports.session_provider import SessionProvider

log = logging.getLogger(__name__)

DEFAULT_APP_NAME: Final[str] = "[DEFAULT]"
DEFAULT_PERSISTENCE_KEY: Final[str] = "default"


@dataclass(eq=False, slots=True, weakref_slot=True)
class AppContext:
    """
    One application-identity context.

    Compared and hashed by identity so it can key a weak mapping.

    :param name: Application name; ``"[DEFAULT]"`` for the default app.
    :param database_url: Backend URL whose leading DNS label identifies the
        legacy authority (e.g. ``https://my-app.firebaseio.com``).
    :param session_provider: Owner of the current session for this app.
    :param credential_store: Legacy credential storage for this installation.
    """

    name: str
    database_url: str
    session_provider: SessionProvider
    credential_store: LegacyCredentialStore

    @property
    def default_persistence_key(self) -> str:
        """Persistence key used when callers do not name a slot."""
        return DEFAULT_PERSISTENCE_KEY if self.name == DEFAULT_APP_NAME else self.name


_apps: dict[str, AppContext] = {}
_apps_lock = threading.Lock()


def initialize_app(
    *,
    database_url: str,
    session_provider: SessionProvider,
    credential_store: LegacyCredentialStore,
    name: str = DEFAULT_APP_NAME,
) -> AppContext:
    """
    Create and register a named application context.

    Re-initializing an existing name replaces the previous context, which is
    then free to be garbage-collected together with its coordinator.
    """
    app = AppContext(
        name=name,
        database_url=database_url,
        session_provider=session_provider,
        credential_store=credential_store,
    )
    with _apps_lock:
        replaced = _apps.get(name)
        _apps[name] = app
    if replaced is not None:
        log.info("app_context.replaced", extra={"app_name": name})
    return app


def get_app(name: str = DEFAULT_APP_NAME) -> AppContext:
    """
    Return the registered context called ``name``.

    :raises ConfigurationError: If no such app was initialized.
    """
    with _apps_lock:
        app = _apps.get(name)
    if app is None:
        raise ConfigurationError(f"App named {name!r} has not been initialized")
    return app


def delete_app(name: str = DEFAULT_APP_NAME) -> bool:
    """Forget the context called ``name``. :returns: True if it existed."""
    with _apps_lock:
        return _apps.pop(name, None) is not None
