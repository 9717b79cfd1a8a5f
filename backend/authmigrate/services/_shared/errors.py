"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between adapters, the
migration coordinator and the delivery layer.

The translation to HTTP responses (RFC 7807) is handled by
``authmigrate/core/errors.py``.

Notes
-----
Migration failures are *not* exceptions: they are resolved into a
:class:`~authmigrate.services.migration.dto.MigrationResult`. The only error
that escapes to callers is :class:`ConfigurationError`.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from adapters or the coordinator.
    - The API layer translates them to problem responses.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ConfigurationError(ServiceError, ValueError):
    """
    Raised when an application context cannot back a migration coordinator.

    Fatal at coordinator-creation time (e.g. unparseable backend host) and
    never retried.
    """

    def __init__(self, message: str = "Unable to migrate app") -> None:
        super().__init__(message)


@dataclass(slots=True)
class SignInError(ServiceError):
    """
    Raised by a session provider when a token cannot establish a session.

    :param detail: Short human-readable explanation.
    :type detail: str
    """

    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return self.detail


__all__ = ["ServiceError", "ConfigurationError", "SignInError"]
