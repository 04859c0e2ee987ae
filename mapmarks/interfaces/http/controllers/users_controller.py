# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from mapmarks.application.use_cases.users.current_user import (
    GetCurrentUserUseCase,
    UpdateProfileUseCase,
)
from mapmarks.interfaces.http.dto.auth import ProfileUpdateDTO, UserOutDTO
from mapmarks.interfaces.http.middleware.access import AccessGuard, current_identity
from mapmarks.shared.errors.validation import raise_validation_error
from mapmarks.shared.logging import logger


class UsersController:
    def __init__(
        self,
        *,
        current_user_use_case: GetCurrentUserUseCase,
        update_profile_use_case: UpdateProfileUseCase,
        guard: AccessGuard,
    ) -> None:
        self._current_user_use_case = current_user_use_case
        self._update_profile_use_case = update_profile_use_case
        self._guard = guard

    def get_profile(self) -> tuple[Response, int]:
        user = self._current_user_use_case.execute(current_identity())
        return jsonify(UserOutDTO.from_domain(user).model_dump(mode="json", by_alias=True)), (
            HTTPStatus.OK
        )

    def update_profile(self) -> tuple[Response, int]:
        try:
            dto = ProfileUpdateDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        identity = current_identity()
        user = self._update_profile_use_case.execute(
            identity, dto.username, self._guard.session_id(request)
        )
        logger.info(f"users.profile: updated user_id={identity.user_id}")
        return jsonify(UserOutDTO.from_domain(user).model_dump(mode="json", by_alias=True)), (
            HTTPStatus.OK
        )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        guarded = self._guard.auth_required
        bp.add_url_rule("/profile", view_func=guarded(self.get_profile), methods=["GET"])
        bp.add_url_rule("/profile", view_func=guarded(self.update_profile), methods=["PUT"])
        return bp
