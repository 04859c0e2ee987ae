# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Identity, SessionRecord, User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def add(self, user: User) -> User: ...
    def set_last_login(self, user_id: int, when: datetime) -> None: ...
    def rename(self, user_id: int, username: str) -> User: ...


class SessionStore(Protocol):
    """Session records keyed by session id, each living for ``ttl_seconds``."""

    def get(self, session_id: str) -> SessionRecord | None: ...
    def set(self, record: SessionRecord, ttl_seconds: int) -> None: ...
    def delete(self, session_id: str) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenCodec(Protocol):
    def encode(self, identity: Identity, session_id: str, expires_at: datetime) -> str: ...
    def decode(self, token: str) -> tuple[Identity, str]: ...
