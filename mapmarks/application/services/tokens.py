# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens (JWT, HS256 by default)."""

from __future__ import annotations

from datetime import UTC, datetime

import jwt

from mapmarks.domain.users.entities import Identity
from mapmarks.domain.users.exceptions import BadTokenError, SessionExpiredError
from mapmarks.domain.users.repositories import TokenCodec


class JwtTokenCodec(TokenCodec):
    def __init__(self, secret: str, algorithm: str = "HS256", *, leeway: int = 0) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._leeway = leeway

    def encode(self, identity: Identity, session_id: str, expires_at: datetime) -> str:
        payload = {
            "sub": str(identity.user_id),
            "username": identity.username,
            "sid": session_id,
            "iat": datetime.now(UTC),
            "exp": expires_at,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> tuple[Identity, str]:
        """Verify signature and expiry, returning the identity and bound session id."""

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                leeway=self._leeway,
                options={"require": ["exp", "sub", "sid"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise SessionExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise BadTokenError() from exc

        try:
            identity = Identity(user_id=int(payload["sub"]), username=str(payload["username"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise BadTokenError() from exc
        return identity, str(payload["sid"])
