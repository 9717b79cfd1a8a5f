"""Migration-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

# Slots end up inside a storage key; keep them short and path-safe.
PERSISTENCE_KEY_FIELD = dict(
    load_default=None,
    validate=[
        validate.Length(min=1, max=128),
        validate.Regexp(r"^[^/\s]+$", error="Must not contain '/' or whitespace."),
    ],
)


class MigrateRequestSchema(Schema):
    """Input payload for ``POST /migration``."""

    persistence_key = fields.String(**PERSISTENCE_KEY_FIELD)


class PersistenceKeyQuerySchema(Schema):
    """Query string accepted by the legacy credential endpoints."""

    persistence_key = fields.String(**PERSISTENCE_KEY_FIELD)


class SessionSchema(Schema):
    """Public view of a signed-in session (never the token)."""

    uid = fields.String(required=True)


class MigrationResultSchema(Schema):
    """Response payload describing the terminal state of a migration."""

    status = fields.Function(lambda result: result.status.value)
    session = fields.Nested(SessionSchema, allow_none=True)
    reason = fields.String(allow_none=True)
    rejection = fields.Function(
        lambda result: result.rejection.value if result.rejection else None
    )
    status_code = fields.Integer(allow_none=True)


class LegacyCredentialStatusSchema(Schema):
    """Response payload for ``GET /migration/legacy``."""

    persistence_key = fields.String(required=True)
    storage_key = fields.String(required=True)
    has_legacy_credential = fields.Boolean(required=True)
