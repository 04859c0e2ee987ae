# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from mapmarks.shared.errors.base import AuthenticationError, DuplicateError, NotFoundError


class UserAlreadyExistsError(DuplicateError):
    code = "username_taken"
    message = "Username already exists"


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    message = "Invalid username or password"


class UserNotFoundError(NotFoundError):
    code = "user_not_found"
    message = "User not found"


class NoSessionError(AuthenticationError):
    code = "unauthenticated"


class SessionExpiredError(AuthenticationError):
    code = "session_expired"


class BadTokenError(AuthenticationError):
    code = "invalid_token"
