"""Tests for the ``flask legacy`` command group."""

from __future__ import annotations

import pytest
import responses

from tests.helpers.http import sent_tokens, stub_exchange
from tests.helpers.migration import TEST_AUTHORITY_HOST, TEST_EXCHANGE_URL, legacy_blob

DEFAULT_KEY = f"{TEST_AUTHORITY_HOST}/default"


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


def test_seed_then_status(runner, app_store) -> None:
    seeded = runner.invoke(args=["legacy", "seed", "--token", "legacy-1"])

    assert seeded.exit_code == 0, seeded.output
    assert f"Seeded {DEFAULT_KEY}" in seeded.output
    assert app_store.get(DEFAULT_KEY) == "legacy-1"

    status = runner.invoke(args=["legacy", "status"])
    assert status.output.strip() == f"{DEFAULT_KEY}: present"


def test_status_absent_for_other_slot(runner, app_store) -> None:
    app_store.put(DEFAULT_KEY, legacy_blob("legacy-1"))

    result = runner.invoke(args=["legacy", "status", "-k", "other"])

    assert result.output.strip() == f"{TEST_AUTHORITY_HOST}/other: absent"


def test_seed_refused_outside_debug_or_testing(app, runner) -> None:
    app.config["TESTING"] = False
    app.config["DEBUG"] = False

    result = runner.invoke(args=["legacy", "seed", "--token", "legacy-1"])

    assert result.exit_code != 0
    assert "non-production" in result.output


def test_clear_with_confirmation(runner, app_store) -> None:
    app_store.put(f"{TEST_AUTHORITY_HOST}/k1", legacy_blob("legacy-1"))

    aborted = runner.invoke(args=["legacy", "clear", "-k", "k1"], input="n\n")
    assert aborted.exit_code != 0
    assert app_store.get(f"{TEST_AUTHORITY_HOST}/k1") == "legacy-1"

    cleared = runner.invoke(args=["legacy", "clear", "-k", "k1", "--yes"])
    assert cleared.exit_code == 0
    assert f"Cleared {TEST_AUTHORITY_HOST}/k1" in cleared.output
    assert f"{TEST_AUTHORITY_HOST}/k1" not in app_store


@responses.activate
def test_migrate_success(runner, app_store, exchanged_token) -> None:
    app_store.put(DEFAULT_KEY, legacy_blob("legacy-1"))
    stub_exchange(TEST_EXCHANGE_URL, body={"token": exchanged_token})

    result = runner.invoke(args=["legacy", "migrate"])

    assert result.exit_code == 0, result.output
    assert "Migration: migrated" in result.output
    assert "user       42" in result.output
    assert sent_tokens() == ["legacy-1"]


@responses.activate
def test_migrate_rejection_exits_non_zero(runner, app_store) -> None:
    app_store.put(DEFAULT_KEY, legacy_blob("legacy-1"))
    stub_exchange(TEST_EXCHANGE_URL, status=400)

    result = runner.invoke(args=["legacy", "--verbose", "migrate"])

    assert result.exit_code == 1
    assert "Migration: rejected" in result.output
    assert "reason     Invalid auth token." in result.output
    assert "rejection  permanent" in result.output
    assert DEFAULT_KEY not in app_store


def test_migrate_nothing_to_do(runner) -> None:
    result = runner.invoke(args=["legacy", "migrate", "-k", "empty"])

    assert result.exit_code == 0
    assert "Migration: no_legacy_credential" in result.output


@responses.activate
def test_sign_out_then_migrate_other_slot(runner, app_store, exchanged_token) -> None:
    app_store.put(f"{TEST_AUTHORITY_HOST}/k1", legacy_blob("legacy-k1"))
    app_store.put(f"{TEST_AUTHORITY_HOST}/k2", legacy_blob("legacy-k2"))
    stub_exchange(TEST_EXCHANGE_URL, body={"token": exchanged_token})
    assert "Migration: migrated" in runner.invoke(args=["legacy", "migrate", "-k", "k1"]).output

    signed_out = runner.invoke(args=["legacy", "sign-out"])
    second = runner.invoke(args=["legacy", "migrate", "-k", "k2"])

    assert signed_out.exit_code == 0
    assert "Signed out 42" in signed_out.output
    assert "Migration: migrated" in second.output
    assert sent_tokens() == ["legacy-k1", "legacy-k2"]


def test_sign_out_without_session(runner) -> None:
    result = runner.invoke(args=["legacy", "sign-out"])

    assert result.exit_code == 0
    assert "No active session" in result.output
