from __future__ import annotations

from typing import Protocol

from authmigrate.services.migration.dto import ExchangeOutcome


class ExchangeClient(Protocol):
    """
    Port for the network round-trip that trades a legacy token for a current one.

    Implementations perform exactly one attempt per call and classify every
    failure into an :class:`~authmigrate.services.migration.dto.ExchangeFailure`
    instead of raising. They may block; callers dispatch them off-thread.
    """

    def exchange(self, endpoint: str, legacy_token: str) -> ExchangeOutcome: ...
