"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authmigrate.api.deps import json_response, timing
from authmigrate.core import extensions

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and legacy-store health information."""

    redis_status = "disabled"
    if extensions.redis_client is not None:
        redis_status = "ok"
        try:
            extensions.redis_client.ping()
        except RedisError:  # pragma: no cover - depends on Redis backend
            current_app.logger.exception("healthcheck.redis_error")
            redis_status = "fail"
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {
        "status": "degraded" if redis_status == "fail" else "ok",
        "redis": redis_status,
        "version": version,
    }
    return json_response(payload)
