# authmigrate/infra/http/exchange_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

import requests

from authmigrate.services._shared.ports import ExchangeClient
from authmigrate.services.migration.dto import (
    ExchangeFailure,
    ExchangeOutcome,
    ExchangeSuccess,
    FailureKind,
)

log = logging.getLogger(__name__)

# The authority answers these when the legacy token itself is bad
PERMANENT_STATUSES = frozenset({HTTPStatus.BAD_REQUEST, HTTPStatus.FORBIDDEN})
MALFORMED_RESPONSE = "malformed response"


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(body: Any) -> str | None:
    """Pull ``error.message`` out of an error body, if present."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    return message if isinstance(message, str) and message else None


def classify_response(response: requests.Response) -> ExchangeOutcome:
    """
    Turn an HTTP response from the authority into an exchange outcome.

    - 200 with a ``token`` string -> success.
    - 200 otherwise -> transient ``"malformed response"``.
    - 400/403 -> permanent.
    - anything else -> transient.
    """
    status = response.status_code
    body = _json_or_none(response)

    if status == HTTPStatus.OK:
        token = body.get("token") if isinstance(body, dict) else None
        if isinstance(token, str) and token:
            return ExchangeSuccess(token=token)
        return ExchangeFailure(FailureKind.TRANSIENT, MALFORMED_RESPONSE, status)

    kind = FailureKind.PERMANENT if status in PERMANENT_STATUSES else FailureKind.TRANSIENT
    return ExchangeFailure(kind, _error_message(body), status)


@dataclass(slots=True)
class RequestsExchangeClient(ExchangeClient):
    """
    Exchange adapter built on :mod:`requests`.

    Performs exactly one ``POST`` per call and never raises: transport errors
    become transient failures with ``status_code == 0``.

    :param session: HTTP session reused across calls (connection pooling).
    :param timeout: Seconds to wait for connect and read.
    """

    session: requests.Session = field(default_factory=requests.Session)
    timeout: float = 10.0

    def exchange(self, endpoint: str, legacy_token: str) -> ExchangeOutcome:
        try:
            response = self.session.post(
                endpoint,
                json={"token": legacy_token},
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning(
                "exchange.failure",
                extra={
                    "endpoint": endpoint,
                    "status_code": 0,
                    "failure_kind": FailureKind.TRANSIENT.value,
                    "error": type(exc).__name__,
                },
            )
            return ExchangeFailure(FailureKind.TRANSIENT, None, 0)

        outcome = classify_response(response)
        if isinstance(outcome, ExchangeFailure):
            log.warning(
                "exchange.failure",
                extra={
                    "endpoint": endpoint,
                    "status_code": outcome.status_code,
                    "failure_kind": outcome.kind.value,
                },
            )
        else:
            log.info("exchange.success", extra={"endpoint": endpoint, "status_code": 200})
        return outcome

    def close(self) -> None:
        self.session.close()
