# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from mapmarks.application.services.credentials import CredentialStore
from mapmarks.application.services.sessions import SessionIssuer
from mapmarks.domain.users.entities import Identity, User
from mapmarks.domain.users.exceptions import UserNotFoundError
from mapmarks.domain.users.repositories import UserRepository


class GetCurrentUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, identity: Identity) -> User:
        user = self._users.find_by_id(identity.user_id)
        if user is None:
            raise UserNotFoundError()
        return user


class UpdateProfileUseCase:
    def __init__(self, *, credentials: CredentialStore, sessions: SessionIssuer) -> None:
        self._credentials = credentials
        self._sessions = sessions

    def execute(self, identity: Identity, username: str, session_id: str | None) -> User:
        user = self._credentials.rename(identity.user_id, username)
        if user.username != identity.username:
            # the session token carries the username, re-sign it so it is not stale
            self._sessions.rebind(session_id, user)
        return user
