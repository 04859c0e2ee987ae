# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Session/token issuer.

A login produces two artefacts: a signed token and a server-side session
record that holds it. ``validate`` checks both, separately: the session must
exist and be unexpired, and the token inside it must verify on its own and
agree with the session about who and which session it belongs to.
Deleting the session is what logs a client out.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from mapmarks.domain.users.entities import Identity, IssuedSession, SessionRecord, User
from mapmarks.domain.users.exceptions import BadTokenError, NoSessionError, SessionExpiredError
from mapmarks.domain.users.repositories import SessionStore, TokenCodec
from mapmarks.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _aware(value: datetime) -> datetime:
    # sqlite hands back naive datetimes
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class SessionIssuer:
    def __init__(
        self,
        *,
        store: SessionStore,
        tokens: TokenCodec,
        token_ttl_seconds: int = 3600,
        session_ttl_seconds: int = 3600,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = new_session_id,
    ) -> None:
        self._store = store
        self._tokens = tokens
        self._token_ttl = timedelta(seconds=token_ttl_seconds)
        self._session_ttl_seconds = session_ttl_seconds
        self._clock = clock
        self._id_factory = id_factory

    def issue(self, user: User) -> IssuedSession:
        now = self._clock()
        identity = Identity(user_id=user.id, username=user.username)
        session_id = self._id_factory()
        token = self._tokens.encode(identity, session_id, now + self._token_ttl)
        expires_at = now + timedelta(seconds=self._session_ttl_seconds)
        self._store.set(
            SessionRecord(
                session_id=session_id,
                token=token,
                user_id=user.id,
                username=user.username,
                expires_at=expires_at,
            ),
            self._session_ttl_seconds,
        )
        logger.info(
            f"sessions.issue: ok (user_id={user.id}, session={session_id[:6]}..., "
            f"exp={expires_at.isoformat()})"
        )
        return IssuedSession(
            session_id=session_id, token=token, expires_at=expires_at, identity=identity
        )

    def validate(self, session_id: str | None) -> Identity:
        record = self.resolve_session(session_id)
        return self.verify_token(record)

    def resolve_session(self, session_id: str | None) -> SessionRecord:
        """First check: a live session record exists for this id."""

        if not session_id:
            raise NoSessionError()
        record = self._store.get(session_id)
        if record is None:
            raise NoSessionError()
        if _aware(record.expires_at) <= self._clock():
            self._store.delete(session_id)
            logger.info(f"sessions.validate: expired (user_id={record.user_id})")
            raise SessionExpiredError()
        return record

    def verify_token(self, record: SessionRecord) -> Identity:
        """Second check: the stored token verifies and matches its session."""

        identity, bound_session_id = self._tokens.decode(record.token)
        if bound_session_id != record.session_id or identity.user_id != record.user_id:
            logger.warning(f"sessions.validate: token/session mismatch (user_id={record.user_id})")
            raise BadTokenError()
        return identity

    def rebind(self, session_id: str | None, user: User) -> Identity:
        """Re-sign a live session for ``user`` after their profile changed.

        The session id and its expiry stay as they were, so the client's
        cookie keeps working; only the token and cached username change.
        """

        record = self.resolve_session(session_id)
        if record.user_id != user.id:
            raise BadTokenError()
        now = self._clock()
        expires_at = _aware(record.expires_at)
        identity = Identity(user_id=user.id, username=user.username)
        token = self._tokens.encode(
            identity, record.session_id, min(now + self._token_ttl, expires_at)
        )
        remaining = max(1, int((expires_at - now).total_seconds()))
        self._store.set(
            SessionRecord(
                session_id=record.session_id,
                token=token,
                user_id=user.id,
                username=user.username,
                expires_at=expires_at,
            ),
            remaining,
        )
        logger.info(
            f"sessions.rebind: ok (user_id={user.id}, session={record.session_id[:6]}...)"
        )
        return identity

    def revoke(self, session_id: str | None) -> None:
        if not session_id:
            return
        self._store.delete(session_id)
        logger.info(f"sessions.revoke: ok (session={session_id[:6]}...)")
