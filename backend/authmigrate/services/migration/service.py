# authmigrate/services/migration/service.py
from __future__ import annotations

import logging
import weakref
from concurrent.futures import Executor, Future
from typing import Final
from urllib.parse import urlparse

from authmigrate.services._shared.errors import ConfigurationError
from authmigrate.services._shared.ports.exchange_client import ExchangeClient
from authmigrate.services.migration.context import AppContext
from authmigrate.services.migration.dto import (
    ExchangeFailure,
    MigrationResult,
    RejectionKind,
    Session,
)

log = logging.getLogger(__name__)

DEFAULT_EXCHANGE_ENDPOINT_TEMPLATE: Final[str] = "https://auth.firebase.com/v2/{authority}/sessions"

# Reasons reported when the authority gives no ``error.message``
PERMANENT_REJECTION_REASON: Final[str] = "Invalid auth token."
TRANSIENT_REJECTION_REASON: Final[str] = "Unable to verify auth token."


def derive_authority(database_url: str) -> tuple[str, str]:
    """
    Split a backend URL into ``(authority host, authority id)``.

    The authority id is the leading DNS label of the host, e.g.
    ``https://my-app.firebaseio.com`` -> ``("my-app.firebaseio.com", "my-app")``.

    :raises ConfigurationError: If no host can be parsed out of the URL.
    """
    try:
        host = urlparse(database_url or "").hostname
    except ValueError as exc:
        raise ConfigurationError(f"Unable to migrate app: invalid backend URL {database_url!r}") from exc
    if not host:
        raise ConfigurationError(f"Unable to migrate app: no host in backend URL {database_url!r}")
    authority_id = host.split(".")[0]
    if not authority_id:
        raise ConfigurationError(f"Unable to migrate app: malformed host {host!r}")
    return host, authority_id


def build_exchange_endpoint(template: str, authority_id: str) -> str:
    """
    Format the exchange endpoint for ``authority_id``.

    :raises ConfigurationError: If the template cannot produce an absolute URL.
    """
    try:
        endpoint = template.format(authority=authority_id)
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigurationError(f"Unable to migrate app: bad endpoint template {template!r}") from exc
    parsed = urlparse(endpoint)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigurationError(f"Unable to migrate app: bad exchange endpoint {endpoint!r}")
    return endpoint


def _resolved(result: MigrationResult) -> Future[MigrationResult]:
    future: Future[MigrationResult] = Future()
    future.set_result(result)
    return future


class MigrationCoordinator:
    """
    Migrate a legacy session into the current scheme for one application.

    The decision procedure, for a given persistence key:

    1. If a session is already active, the legacy credential is removed and
       the active session is left untouched.
    2. If no legacy credential is stored, nothing happens.
    3. Otherwise the legacy token is exchanged once with the remote authority
       (on the shared worker pool) and the new token is used to sign in.
    4. The legacy credential is removed after a successful sign-in or when the
       authority rejects it permanently (HTTP 400/403). Transient failures and
       local sign-in failures keep it so ``migrate()`` can be retried.

    Instances hold only derived configuration plus a weak reference to their
    :class:`AppContext`; obtain them from
    :class:`~authmigrate.services.migration.registry.InstanceRegistry`.
    """

    def __init__(
        self,
        app: AppContext,
        *,
        exchange_client: ExchangeClient,
        executor: Executor,
        endpoint_template: str = DEFAULT_EXCHANGE_ENDPOINT_TEMPLATE,
    ) -> None:
        """
        Derive the exchange configuration for ``app``.

        :param app: Application-identity context being migrated.
        :param exchange_client: Adapter performing the HTTP round-trip.
        :param executor: Shared worker pool running the exchange.
        :param endpoint_template: Format string with an ``{authority}`` field.
        :raises ConfigurationError: If the backend host cannot be parsed.
        """
        self.authority_host, self.authority_id = derive_authority(app.database_url)
        self.exchange_endpoint = build_exchange_endpoint(endpoint_template, self.authority_id)

        self._app_ref = weakref.ref(app)
        self.default_persistence_key = app.default_persistence_key
        self.sessions = app.session_provider
        self.store = app.credential_store
        self.exchange_client = exchange_client
        self._executor = executor

    @property
    def app(self) -> AppContext:
        """The application context this coordinator migrates."""
        app = self._app_ref()
        if app is None:
            raise ConfigurationError("App context has been deleted")
        return app

    def storage_key(self, persistence_key: str | None = None) -> str:
        """Address of the legacy credential for ``persistence_key``."""
        return f"{self.authority_host}/{self._resolve_key(persistence_key)}"

    def _resolve_key(self, persistence_key: str | None) -> str:
        # Only ``None`` means "the app's own slot"; "" is a slot name like any other
        return self.default_persistence_key if persistence_key is None else persistence_key

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #

    def migrate(self, persistence_key: str | None = None) -> Future[MigrationResult]:
        """
        Migrate the legacy session stored under ``persistence_key``.

        Uses the app's name (or ``"default"`` for the default app) when no
        key is given. The session check and store lookup run on the calling
        thread; the exchange, sign-in and cleanup run on the worker pool.
        Abandoning the returned future does not cancel those side effects.

        :returns: Future resolving to a :class:`MigrationResult`; it never
            resolves to an exception.
        """
        key = self._resolve_key(persistence_key)
        storage_key = self.storage_key(key)

        current = self.sessions.current_session()
        if current is not None:
            # An existing session always wins; only the legacy data goes.
            self.store.delete(storage_key)
            log.info("migration.already_active", extra={"persistence_key": key})
            return _resolved(MigrationResult.already_active(current))

        legacy_token = self.store.get(storage_key)
        if legacy_token is None:
            log.debug("migration.no_legacy_credential", extra={"persistence_key": key})
            return _resolved(MigrationResult.no_legacy_credential())

        try:
            return self._executor.submit(
                self._exchange_and_sign_in, key, storage_key, legacy_token
            )
        except RuntimeError:
            # Pool already shut down; nothing was attempted so the credential stays.
            log.warning("migration.executor_unavailable", extra={"persistence_key": key})
            return _resolved(
                MigrationResult.rejected(
                    TRANSIENT_REJECTION_REASON, rejection=RejectionKind.TRANSIENT
                )
            )

    def sign_out(self) -> Session | None:
        """
        End the current session so other slots can be migrated.

        Legacy credentials are left untouched.

        :returns: The session that was active, if any.
        """
        current = self.sessions.current_session()
        self.sessions.sign_out()
        if current is not None:
            log.info("migration.signed_out")
        return current

    def has_legacy_credential(self, persistence_key: str | None = None) -> bool:
        """Check whether a usable legacy token is stored for ``persistence_key``."""
        return self.store.get(self.storage_key(persistence_key)) is not None

    def clear_legacy_credential(self, persistence_key: str | None = None) -> None:
        """Remove the legacy credential for ``persistence_key``. Idempotent."""
        self.store.delete(self.storage_key(persistence_key))

    # ------------------------------------------------------------------ #
    # Worker-pool side
    # ------------------------------------------------------------------ #

    def _exchange_and_sign_in(self, key: str, storage_key: str, legacy_token: str) -> MigrationResult:
        try:
            return self._run_exchange(key, storage_key, legacy_token)
        except Exception:
            # Unknown state: keep the legacy credential so a retry is possible.
            log.exception("migration.unexpected_error", extra={"persistence_key": key})
            return MigrationResult.rejected(
                TRANSIENT_REJECTION_REASON, rejection=RejectionKind.TRANSIENT
            )

    def _run_exchange(self, key: str, storage_key: str, legacy_token: str) -> MigrationResult:
        outcome = self.exchange_client.exchange(self.exchange_endpoint, legacy_token)

        if isinstance(outcome, ExchangeFailure):
            return self._reject(key, storage_key, outcome)

        try:
            session: Session = self.sessions.sign_in_with_token(outcome.token)
        except Exception as exc:
            # The exchange worked; the legacy token may still be good next time.
            log.warning(
                "migration.sign_in_failed",
                extra={"persistence_key": key},
                exc_info=True,
            )
            return MigrationResult.rejected(
                str(exc) or type(exc).__name__, rejection=RejectionKind.SIGN_IN
            )

        self.store.delete(storage_key)
        log.info("migration.migrated", extra={"persistence_key": key})
        return MigrationResult.migrated(session)

    def _reject(self, key: str, storage_key: str, failure: ExchangeFailure) -> MigrationResult:
        if failure.is_permanent:
            self.store.delete(storage_key)
            reason = failure.message or PERMANENT_REJECTION_REASON
            rejection = RejectionKind.PERMANENT
        else:
            reason = failure.message or TRANSIENT_REJECTION_REASON
            rejection = RejectionKind.TRANSIENT

        log.warning(
            "migration.rejected",
            extra={
                "persistence_key": key,
                "failure_kind": rejection.value,
                "status_code": failure.status_code,
            },
        )
        return MigrationResult.rejected(
            reason, rejection=rejection, status_code=failure.status_code
        )
