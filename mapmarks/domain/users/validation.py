# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Username and password rules.

Each rule raises ``ValidationError`` naming the field; callers run them in
order so the first violated rule is the one reported.
"""

from __future__ import annotations

import re

from mapmarks.shared.errors.base import ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 64
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def validate_username(username: str | None) -> str:
    value = (username or "").strip()
    if not value:
        raise ValidationError("Username is required", field="username")
    if len(value) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters long",
            field="username",
        )
    if len(value) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be at most {USERNAME_MAX_LENGTH} characters long",
            field="username",
        )
    if not _USERNAME_RE.match(value):
        raise ValidationError(
            "Username can only contain letters, numbers, and underscores",
            field="username",
        )
    return value


def validate_new_password(password: str | None) -> str:
    value = password or ""
    if not value:
        raise ValidationError("Password is required", field="password")
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
            field="password",
        )
    if len(value) > PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f"Password must be at most {PASSWORD_MAX_LENGTH} characters long",
            field="password",
        )
    if not (
        re.search(r"[A-Z]", value) and re.search(r"[a-z]", value) and re.search(r"\d", value)
    ):
        raise ValidationError(
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number",
            field="password",
        )
    return value


def validate_registration(username: str | None, password: str | None) -> tuple[str, str]:
    return validate_username(username), validate_new_password(password)
