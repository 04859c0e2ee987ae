# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import delete
from sqlalchemy.orm import Session as OrmSession

from mapmarks.domain.users.entities import SessionRecord
from mapmarks.domain.users.repositories import SessionStore
from mapmarks.infrastructure.db.models import Session
from mapmarks.infrastructure.timestamps import as_utc
from mapmarks.infrastructure.unit_of_work import unit_of_work_scope
from mapmarks.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SqlAlchemySessionStore(SessionStore):
    """Sessions in the ``sessions`` table; survive restarts.

    ``expires_at`` on the record is the authority on lifetime. Rows past it are
    purged whenever a new session is written.
    """

    def __init__(
        self,
        session_factory: Callable[[], OrmSession],
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def get(self, session_id: str) -> SessionRecord | None:
        with unit_of_work_scope(self._session_factory, "sessions.get") as session:
            row = session.get(Session, session_id)
            if row is None:
                return None
            return SessionRecord(
                session_id=row.session_id,
                token=row.token,
                user_id=row.user_id,
                username=row.username,
                expires_at=as_utc(row.expires_at),
            )

    def set(self, record: SessionRecord, ttl_seconds: int) -> None:
        with unit_of_work_scope(
            self._session_factory, "sessions.set", user_id=record.user_id
        ) as session:
            purged = session.execute(
                delete(Session).where(Session.expires_at < self._clock())
            ).rowcount
            session.merge(
                Session(
                    session_id=record.session_id,
                    token=record.token,
                    user_id=record.user_id,
                    username=record.username,
                    expires_at=record.expires_at,
                )
            )
        if purged:
            logger.debug(f"sessions: purged {purged} expired rows")

    def delete(self, session_id: str) -> None:
        with unit_of_work_scope(self._session_factory, "sessions.delete") as session:
            session.execute(delete(Session).where(Session.session_id == session_id))


__all__ = ["SqlAlchemySessionStore"]
