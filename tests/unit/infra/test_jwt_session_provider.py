"""Unit tests for the Flask-JWT-Extended backed session provider."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from authmigrate.infra.jwt.jwt_session_provider import JWTSessionProvider
from authmigrate.services._shared.errors import SignInError
from flask_jwt_extended import create_access_token

from tests.helpers.auth import expired_token, issue_token


@pytest.fixture()
def provider(app):
    return JWTSessionProvider(app)


def test_sign_in_makes_subject_current(provider) -> None:
    token = issue_token("42")

    session = provider.sign_in_with_token(token)

    assert session.uid == "42"
    assert session.token == token
    assert session.claims["sub"] == "42"
    assert provider.current_session() == session


def test_sign_in_from_worker_thread_without_flask_context(provider) -> None:
    """Worker threads carry no app context; the provider pushes its own."""
    token = issue_token("7")

    with ThreadPoolExecutor(max_workers=1) as pool:
        session = pool.submit(provider.sign_in_with_token, token).result(timeout=5)

    assert session.uid == "7"


@pytest.mark.parametrize("bad", ["garbage", "a.b.c", ""])
def test_undecodable_token_is_rejected(provider, bad) -> None:
    with pytest.raises(SignInError):
        provider.sign_in_with_token(bad)
    assert provider.current_session() is None


def test_expired_token_is_rejected(provider) -> None:
    with pytest.raises(SignInError):
        provider.sign_in_with_token(expired_token("42"))


def test_token_for_other_secret_is_rejected(app, provider) -> None:
    foreign = issue_token("42")
    app.config["JWT_SECRET_KEY"] = "another-secret-key-of-sufficient-length"

    with pytest.raises(SignInError):
        provider.sign_in_with_token(foreign)


def test_sign_out_clears_current(provider) -> None:
    provider.sign_in_with_token(create_access_token(identity="42"))

    provider.sign_out()

    assert provider.current_session() is None
