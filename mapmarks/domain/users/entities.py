# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:
    id: int
    username: str
    password_hash: str
    created_at: datetime
    last_login: datetime | None = None


@dataclass(slots=True, frozen=True)
class Identity:
    """Authenticated principal attached to a request."""

    user_id: int
    username: str


@dataclass(slots=True, frozen=True)
class SessionRecord:
    """Server-side state bound to an opaque session id."""

    session_id: str
    token: str
    user_id: int
    username: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class IssuedSession:
    session_id: str
    token: str
    expires_at: datetime
    identity: Identity
