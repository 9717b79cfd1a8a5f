from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Protocol

from authmigrate.services._shared.errors import SignInError
from authmigrate.services.migration.dto import Session


class SessionProvider(Protocol):
    """
    Port for the identity provider owning the *current* session.

    The migration core only needs to know whether somebody is signed in and
    to sign in with a freshly exchanged token. Errors are opaque beyond
    success/failure.
    """

    def current_session(self) -> Session | None: ...

    def sign_in_with_token(self, token: str) -> Session: ...

    def sign_out(self) -> None: ...


class StubSessionProvider(SessionProvider):
    """Deterministic session provider used in unit tests."""

    def __init__(
        self,
        *,
        accepted_tokens: Iterable[str] | None = None,
        current: Session | None = None,
    ) -> None:
        # ``None`` accepts every token
        self._accepted = set(accepted_tokens) if accepted_tokens is not None else None
        self._current = current
        self._lock = threading.Lock()
        self.sign_in_calls: list[str] = []

    def current_session(self) -> Session | None:
        with self._lock:
            return self._current

    def sign_in_with_token(self, token: str) -> Session:
        with self._lock:
            self.sign_in_calls.append(token)
            if self._accepted is not None and token not in self._accepted:
                raise SignInError(f"Token rejected: {token}")
            self._current = Session(uid=f"uid-{token}", token=token)
            return self._current

    def sign_out(self) -> None:
        with self._lock:
            self._current = None
