# authmigrate/infra/jwt/jwt_session_provider.py
from __future__ import annotations

import threading
from typing import Any, cast

from flask import Flask

from authmigrate.services._shared.errors import SignInError
from authmigrate.services._shared.ports import SessionProvider
from authmigrate.services.migration.dto import Session


class JWTSessionProvider(SessionProvider):
    """
    Session provider verifying exchanged tokens with Flask-JWT-Extended.

    The token returned by the exchange authority is a JWT signed for this
    backend; signing in decodes it (signature, expiry, issuer settings from
    the Flask config) and makes its subject the current user.

    .. note::
       Decoding runs inside ``flask_app.app_context()`` so it also works from
       the migration worker threads, which carry no Flask context.
    """

    def __init__(self, flask_app: Flask) -> None:
        self.flask_app = flask_app
        self._current: Session | None = None
        self._lock = threading.Lock()

    def current_session(self) -> Session | None:
        with self._lock:
            return self._current

    def sign_in_with_token(self, token: str) -> Session:
        claims = self._decode(token)
        subject = claims.get("sub")
        if subject is None or subject == "":
            raise SignInError("Exchanged token has no subject.")
        session = Session(uid=str(subject), token=token, claims=claims)
        with self._lock:
            self._current = session
        return session

    def sign_out(self) -> None:
        with self._lock:
            self._current = None

    def _decode(self, token: str) -> dict[str, Any]:
        from flask_jwt_extended import decode_token
        from flask_jwt_extended.exceptions import JWTExtendedException
        from jwt.exceptions import PyJWTError

        with self.flask_app.app_context():
            try:
                return cast(dict[str, Any], decode_token(token))
            except (PyJWTError, JWTExtendedException) as exc:
                raise SignInError(f"Invalid exchanged token: {exc}") from exc
