# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Identity, IssuedSession, SessionRecord, User
from .exceptions import (
    BadTokenError,
    InvalidCredentialsError,
    NoSessionError,
    SessionExpiredError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "BadTokenError",
    "Identity",
    "InvalidCredentialsError",
    "IssuedSession",
    "NoSessionError",
    "SessionExpiredError",
    "SessionRecord",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
