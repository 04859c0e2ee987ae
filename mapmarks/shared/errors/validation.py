# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def first_pydantic_error(exc: PydanticValidationError) -> tuple[str, str]:
    """Return ``(field_path, message)`` of the first reported violation."""

    errors = exc.errors()
    if not errors:
        return "unknown", "Invalid input"
    error = errors[0]
    loc = error.get("loc", ())
    field_path = ".".join(str(part) for part in loc if part is not None) or "unknown"
    message = str(error.get("msg") or "Invalid value")
    return field_path, message


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    field, message = first_pydantic_error(exc)
    raise ValidationError(f"{field}: {message}", field=field) from exc


__all__ = [
    "first_pydantic_error",
    "raise_validation_error",
]
