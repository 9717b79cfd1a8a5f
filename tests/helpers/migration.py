"""Migration doubles and fixtures data shared by the test modules."""

from __future__ import annotations

import json
from typing import Any

from authmigrate.services.migration.dto import ExchangeOutcome

# Endpoint derived from TestingConfig.DATABASE_URL
TEST_EXCHANGE_URL = "https://auth.firebase.com/v2/test-app/sessions"
TEST_AUTHORITY_HOST = "test-app.firebaseio.com"


def legacy_blob(token: str, **extra: Any) -> str:
    """Build a blob the way the legacy SDK stored it."""
    return json.dumps({"token": token, "provider": "password", **extra})


class ScriptedExchangeClient:
    """Exchange client double replaying queued outcomes and recording calls.

    The last outcome repeats once the queue is drained; exceptions are raised.
    """

    def __init__(self, *outcomes: ExchangeOutcome | Exception) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, str]] = []

    def exchange(self, endpoint: str, legacy_token: str) -> ExchangeOutcome:
        self.calls.append((endpoint, legacy_token))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
