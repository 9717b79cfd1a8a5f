# authmigrate/services/migration/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------- Session ------------------------------------- #


@dataclass(frozen=True, slots=True)
class Session:
    """
    Authenticated session produced by a session provider.

    :param uid: Identity of the signed-in user.
    :type uid: str
    :param token: Token the session was established with.
    :type token: str
    :param claims: Decoded claims, if the provider exposes them.
    :type claims: dict[str, Any]
    """

    uid: str
    token: str
    claims: dict[str, Any] = field(default_factory=dict, compare=False)


# ------------------------- Exchange outcome ------------------------------- #


class FailureKind(Enum):
    """Whether retrying an exchange with the same legacy token can succeed."""

    PERMANENT = "permanent"
    TRANSIENT = "transient"


@dataclass(frozen=True, slots=True)
class ExchangeSuccess:
    """
    The authority accepted the legacy token.

    :param token: Token valid under the current scheme.
    :type token: str
    """

    token: str


@dataclass(frozen=True, slots=True)
class ExchangeFailure:
    """
    The authority (or the network) refused the exchange.

    :param kind: Permanent (400/403) or transient (anything else).
    :type kind: FailureKind
    :param message: ``error.message`` from the response body, if any.
    :type message: str | None
    :param status_code: HTTP status; ``0`` for network-level failures.
    :type status_code: int
    """

    kind: FailureKind
    message: str | None
    status_code: int

    @property
    def is_permanent(self) -> bool:
        return self.kind is FailureKind.PERMANENT


ExchangeOutcome = ExchangeSuccess | ExchangeFailure


# ------------------------- Migration result ------------------------------- #


class MigrationStatus(Enum):
    """Terminal state of one ``migrate()`` call."""

    ALREADY_ACTIVE = "already_active"
    NO_LEGACY_CREDENTIAL = "no_legacy_credential"
    MIGRATED = "migrated"
    REJECTED = "rejected"


class RejectionKind(Enum):
    """Why a migration was rejected; drives whether the legacy token survives."""

    PERMANENT = "permanent"
    TRANSIENT = "transient"
    SIGN_IN = "sign_in"


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """
    Tagged result returned once per ``migrate()`` call. Not persisted.

    Use the classmethod constructors rather than building instances by hand;
    they keep ``session``/``reason`` consistent with ``status``.
    """

    status: MigrationStatus
    session: Session | None = None
    reason: str | None = None
    rejection: RejectionKind | None = None
    status_code: int | None = None

    @classmethod
    def already_active(cls, session: Session) -> MigrationResult:
        return cls(status=MigrationStatus.ALREADY_ACTIVE, session=session)

    @classmethod
    def no_legacy_credential(cls) -> MigrationResult:
        return cls(status=MigrationStatus.NO_LEGACY_CREDENTIAL)

    @classmethod
    def migrated(cls, session: Session) -> MigrationResult:
        return cls(status=MigrationStatus.MIGRATED, session=session)

    @classmethod
    def rejected(
        cls,
        reason: str,
        *,
        rejection: RejectionKind,
        status_code: int | None = None,
    ) -> MigrationResult:
        return cls(
            status=MigrationStatus.REJECTED,
            reason=reason,
            rejection=rejection,
            status_code=status_code,
        )
