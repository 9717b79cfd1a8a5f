"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from authmigrate.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.INFO


def test_json_formatter_copies_known_extras_only() -> None:
    """Migration extras are rendered; unknown attributes are not."""

    record = logging.LogRecord("authmigrate", logging.INFO, __file__, 1, "migration.rejected", None, None)
    record.persistence_key = "default"
    record.failure_kind = "permanent"
    record.status_code = 403
    record.legacy_token = "must-not-leak"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "migration.rejected"
    assert payload["persistence_key"] == "default"
    assert payload["failure_kind"] == "permanent"
    assert payload["status_code"] == 403
    assert "legacy_token" not in payload
