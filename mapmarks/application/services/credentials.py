# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Credential store: user creation, password verification, login stamps."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from mapmarks.domain.users.entities import User
from mapmarks.domain.users.exceptions import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from mapmarks.domain.users.repositories import PasswordHasher, UserRepository
from mapmarks.domain.users.validation import validate_registration, validate_username
from mapmarks.shared.errors.base import StorageError
from mapmarks.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CredentialStore:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._clock = clock
        self._dummy_hash: str | None = None

    def register(self, username: str, raw_password: str) -> User:
        """Validate, hash, persist. In that order, each stage only once."""

        username, raw_password = validate_registration(username, raw_password)
        if self._users.find_by_username(username) is not None:
            raise UserAlreadyExistsError()

        password_hash = self._password_hasher.hash(raw_password)

        user = User(id=0, username=username, password_hash=password_hash, created_at=self._clock())
        # the unique index still decides races between the check above and this insert
        persisted = self._users.add(user)
        logger.info(f"credentials.register: ok (user_id={persisted.id})")
        return persisted

    def verify(self, username: str, raw_password: str) -> User:
        user = self._users.find_by_username((username or "").strip())
        if user is None:
            # burn one hash check so unknown users cost as much as wrong passwords
            self._password_hasher.verify(raw_password or "", self._placeholder_hash())
            raise InvalidCredentialsError()
        if not self._password_hasher.verify(raw_password or "", user.password_hash):
            raise InvalidCredentialsError()
        return user

    def touch_login(self, user: User) -> User:
        when = self._clock()
        try:
            self._users.set_last_login(user.id, when)
        except StorageError:
            logger.exception(f"credentials.touch_login: failed (user_id={user.id})")
            return user
        return replace(user, last_login=when)

    def rename(self, user_id: int, new_username: str) -> User:
        """Change the username; the stored hash is left untouched."""

        username = validate_username(new_username)
        current = self._users.find_by_id(user_id)
        if current is None:
            raise UserNotFoundError()
        if current.username == username:
            return current
        existing = self._users.find_by_username(username)
        if existing is not None and existing.id != user_id:
            raise UserAlreadyExistsError()
        return self._users.rename(user_id, username)

    def _placeholder_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash(secrets.token_urlsafe(16))
        return self._dummy_hash
