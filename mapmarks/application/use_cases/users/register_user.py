# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from mapmarks.application.services.credentials import CredentialStore
from mapmarks.domain.users.entities import User


class RegisterUserUseCase:
    def __init__(self, *, credentials: CredentialStore) -> None:
        self._credentials = credentials

    def execute(self, username: str, password: str) -> User:
        return self._credentials.register(username, password)
