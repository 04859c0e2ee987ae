# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mapmarks.domain.users.entities import User as DomainUser
from mapmarks.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from mapmarks.domain.users.repositories import UserRepository
from mapmarks.infrastructure.db.models import User
from mapmarks.infrastructure.timestamps import as_utc, as_utc_or_none
from mapmarks.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=as_utc(row.created_at),
        last_login=as_utc_or_none(row.last_login),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "users.find_by_username") as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(
            self._session_factory, "users.find_by_id", user_id=user_id
        ) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory, "users.add") as session:
                row = User(
                    username=user.username,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            # unique index on username lost a race with a concurrent registration
            raise UserAlreadyExistsError() from exc

    def set_last_login(self, user_id: int, when: datetime) -> None:
        with unit_of_work_scope(
            self._session_factory, "users.set_last_login", user_id=user_id
        ) as session:
            session.execute(update(User).where(User.id == user_id).values(last_login=when))

    def rename(self, user_id: int, username: str) -> DomainUser:
        try:
            with unit_of_work_scope(
                self._session_factory, "users.rename", user_id=user_id
            ) as session:
                row = session.get(User, user_id)
                if row is None:
                    raise UserNotFoundError(context={"user_id": user_id})
                row.username = username
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc
