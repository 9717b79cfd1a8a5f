"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from marshmallow import Schema

F = TypeVar("F", bound=Callable[..., Any])


def load_json(schema: Schema) -> dict[str, Any]:
    """Validate the JSON body (an empty body counts as ``{}``)."""

    return schema.load(request.get_json(silent=True) or {})


def load_query(schema: Schema, args: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Validate ``request.args`` with a Marshmallow schema."""

    return schema.load(dict(args if args is not None else request.args))


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
