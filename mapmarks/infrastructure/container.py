# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from mapmarks.application.services.credentials import CredentialStore
from mapmarks.application.services.location_store import LocationStore
from mapmarks.application.services.password_hashing import WerkzeugPasswordHasher
from mapmarks.application.services.sessions import SessionIssuer
from mapmarks.application.services.tokens import JwtTokenCodec
from mapmarks.application.use_cases.users.current_user import (
    GetCurrentUserUseCase,
    UpdateProfileUseCase,
)
from mapmarks.application.use_cases.users.login_user import LoginUserUseCase
from mapmarks.application.use_cases.users.logout_user import LogoutUserUseCase
from mapmarks.application.use_cases.users.register_user import RegisterUserUseCase
from mapmarks.domain.users.repositories import SessionStore
from mapmarks.infrastructure.db import SessionLocal
from mapmarks.infrastructure.repositories.locations import SqlAlchemyLocationRepository
from mapmarks.infrastructure.repositories.users import SqlAlchemyUserRepository
from mapmarks.infrastructure.sessions import InMemorySessionStore, SqlAlchemySessionStore
from mapmarks.interfaces.http.controllers.auth_controller import AuthController
from mapmarks.interfaces.http.controllers.locations_controller import LocationsController
from mapmarks.interfaces.http.controllers.misc_controller import MiscController
from mapmarks.interfaces.http.controllers.users_controller import UsersController
from mapmarks.interfaces.http.middleware.access import AccessGuard
from mapmarks.shared.config import AppConfig, load_config
from mapmarks.shared.logging import logger


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config

    @cached_property
    def config(self) -> AppConfig:
        return self._config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        return JwtTokenCodec(self.config.auth.jwt_secret, self.config.auth.jwt_algorithm)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(SessionLocal)

    @cached_property
    def location_repository(self) -> SqlAlchemyLocationRepository:
        return SqlAlchemyLocationRepository(SessionLocal)

    @cached_property
    def session_store(self) -> SessionStore:
        if self.config.auth.session_backend == "memory":
            logger.warning("sessions: using in-memory store, sessions end with the process")
            return InMemorySessionStore()
        return SqlAlchemySessionStore(SessionLocal)

    @cached_property
    def credential_store(self) -> CredentialStore:
        return CredentialStore(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def session_issuer(self) -> SessionIssuer:
        return SessionIssuer(
            store=self.session_store,
            tokens=self.token_codec,
            token_ttl_seconds=self.config.auth.token_ttl_seconds,
            session_ttl_seconds=self.config.auth.session_ttl_seconds,
        )

    @cached_property
    def location_store(self) -> LocationStore:
        return LocationStore(locations=self.location_repository)

    @cached_property
    def access_guard(self) -> AccessGuard:
        return AccessGuard(
            issuer=self.session_issuer, cookie_name=self.config.auth.session_cookie_name
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(credentials=self.credential_store)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(credentials=self.credential_store, sessions=self.session_issuer)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_issuer)

    @cached_property
    def current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository)

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(
            credentials=self.credential_store, sessions=self.session_issuer
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            current_user_use_case=self.current_user_use_case,
            guard=self.access_guard,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            current_user_use_case=self.current_user_use_case,
            update_profile_use_case=self.update_profile_use_case,
            guard=self.access_guard,
        )

    @cached_property
    def locations_controller(self) -> LocationsController:
        return LocationsController(store=self.location_store, guard=self.access_guard)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()


container = Container()
