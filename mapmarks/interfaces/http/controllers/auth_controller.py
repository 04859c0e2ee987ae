# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from mapmarks.application.use_cases.users.current_user import GetCurrentUserUseCase
from mapmarks.application.use_cases.users.login_user import LoginUserUseCase
from mapmarks.application.use_cases.users.logout_user import LogoutUserUseCase
from mapmarks.application.use_cases.users.register_user import RegisterUserUseCase
from mapmarks.interfaces.http.dto.auth import (
    LoginRequestDTO,
    MessageDTO,
    RegisterRequestDTO,
    UserOutDTO,
)
from mapmarks.interfaces.http.middleware.access import AccessGuard, current_identity
from mapmarks.shared.config import load_config
from mapmarks.shared.errors.validation import raise_validation_error
from mapmarks.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        current_user_use_case: GetCurrentUserUseCase,
        guard: AccessGuard,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._current_user_use_case = current_user_use_case
        self._guard = guard

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(dto.username, dto.password)

        logger.info(f"auth.register: ok user_id={user.id}")
        payload = MessageDTO(message="Registration successful").model_dump()
        return jsonify(payload), HTTPStatus.CREATED

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._login_use_case.execute(
            dto.username, dto.password, previous_session_id=self._guard.session_id(request)
        )

        response = jsonify(
            {
                "token": result.session.token,
                "user": UserOutDTO.from_domain(result.user).brief(),
            }
        )
        config = load_config()
        response.set_cookie(
            self._guard.cookie_name,
            result.session.session_id,
            httponly=True,
            samesite=config.security.cookie_samesite,
            secure=config.security.cookie_secure,
            max_age=config.auth.session_ttl_seconds,
        )
        logger.info(f"auth.login: ok user_id={result.user.id}")
        return response, HTTPStatus.OK

    def logout(self) -> tuple[Response, int]:
        self._logout_use_case.execute(self._guard.session_id(request))

        payload = MessageDTO(message="Logged out successfully").model_dump()
        response = jsonify(payload)
        config = load_config()
        response.delete_cookie(
            self._guard.cookie_name,
            samesite=config.security.cookie_samesite,
            secure=config.security.cookie_secure,
            httponly=True,
        )
        logger.info("auth.logout: ok")
        return response, HTTPStatus.OK

    def me(self) -> tuple[Response, int]:
        user = self._current_user_use_case.execute(current_identity())
        return jsonify(UserOutDTO.from_domain(user).model_dump(mode="json", by_alias=True)), (
            HTTPStatus.OK
        )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/me", view_func=self._guard.auth_required(self.me), methods=["GET"])
        return bp
