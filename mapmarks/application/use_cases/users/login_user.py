# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from mapmarks.application.services.credentials import CredentialStore
from mapmarks.application.services.sessions import SessionIssuer
from mapmarks.domain.users.entities import IssuedSession, User


@dataclass(slots=True, frozen=True)
class LoginResult:
    user: User
    session: IssuedSession


class LoginUserUseCase:
    def __init__(self, *, credentials: CredentialStore, sessions: SessionIssuer) -> None:
        self._credentials = credentials
        self._sessions = sessions

    def execute(
        self, username: str, password: str, previous_session_id: str | None = None
    ) -> LoginResult:
        user = self._credentials.verify(username, password)
        user = self._credentials.touch_login(user)
        # one session per client: the cookie it arrived with is replaced
        self._sessions.revoke(previous_session_id)
        return LoginResult(user=user, session=self._sessions.issue(user))
