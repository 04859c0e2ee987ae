# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from mapmarks.domain.users.entities import SessionRecord
from mapmarks.domain.users.repositories import SessionStore
from mapmarks.shared.logging import logger


@dataclass(slots=True)
class SessionEntry:
    record: SessionRecord
    expires_at: float


class InMemorySessionStore(SessionStore):
    """Process-local session table. Everything is lost on restart."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = Lock()
        self._store: dict[str, SessionEntry] = {}

    def get(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            entry = self._store.get(session_id)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                self._store.pop(session_id, None)
                logger.debug("sessions: evicted expired entry")
                return None
            return entry.record

    def set(self, record: SessionRecord, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._store[record.session_id] = SessionEntry(record=record, expires_at=expires_at)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._store.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


__all__ = ["InMemorySessionStore"]
