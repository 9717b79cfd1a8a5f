"""One :class:`MigrationCoordinator` per live application context."""

from __future__ import annotations

import logging
import threading
import weakref
from concurrent.futures import ThreadPoolExecutor

from authmigrate.services._shared.ports.exchange_client import ExchangeClient
from authmigrate.services.migration.context import AppContext, get_app
from authmigrate.services.migration.service import (
    DEFAULT_EXCHANGE_ENDPOINT_TEMPLATE,
    MigrationCoordinator,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class InstanceRegistry:
    """
    Lazily create and cache coordinators, keyed weakly by :class:`AppContext`.

    The registry never keeps an app alive: once the app is garbage-collected
    its coordinator goes with it. It also owns the worker pool and the
    exchange client shared by every coordinator it creates.
    """

    def __init__(
        self,
        *,
        exchange_client: ExchangeClient | None = None,
        endpoint_template: str = DEFAULT_EXCHANGE_ENDPOINT_TEMPLATE,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._instances: weakref.WeakKeyDictionary[AppContext, MigrationCoordinator] = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()
        self._exchange_client = exchange_client
        self._executor: ThreadPoolExecutor | None = None
        self.endpoint_template = endpoint_template
        self.max_workers = max(1, int(max_workers))

    def get_instance(self, app: AppContext | None = None) -> MigrationCoordinator:
        """
        Return the coordinator for ``app`` (the default app when omitted).

        :raises ConfigurationError: If ``app`` cannot be migrated (bad backend
            host) or no default app is registered.
        """
        if app is None:
            app = get_app()
        with self._lock:
            instance = self._instances.get(app)
            if instance is None:
                instance = MigrationCoordinator(
                    app,
                    exchange_client=self._shared_exchange_client(),
                    executor=self._shared_executor(),
                    endpoint_template=self.endpoint_template,
                )
                self._instances[app] = instance
                log.debug(
                    "registry.created",
                    extra={"app_name": app.name, "endpoint": instance.exchange_endpoint},
                )
            return instance

    def discard(self, app: AppContext) -> bool:
        """Drop the coordinator for ``app`` ahead of garbage collection."""
        with self._lock:
            return self._instances.pop(app, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)

    def shutdown(self, *, wait: bool = True) -> None:
        """
        Stop the shared worker pool; the next lookup starts a fresh one.

        Coordinators handed out earlier stay usable but resolve any migration
        needing an exchange as a transient rejection.
        """
        with self._lock:
            executor, self._executor = self._executor, None
            self._instances.clear()
        if executor is not None:
            executor.shutdown(wait=wait)

    # --------------------------- helpers --------------------------------

    def _shared_executor(self) -> ThreadPoolExecutor:
        # caller holds self._lock
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="legacy-exchange"
            )
        return self._executor

    def _shared_exchange_client(self) -> ExchangeClient:
        # caller holds self._lock
        if self._exchange_client is None:
            from authmigrate.infra.http.exchange_client import RequestsExchangeClient

            self._exchange_client = RequestsExchangeClient()
        return self._exchange_client

