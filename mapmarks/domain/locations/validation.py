# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Field rules for new locations, checked in a fixed order.

title -> rating -> coordinates -> price; the first failure is reported.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from mapmarks.shared.errors.base import ValidationError

from .entities import GeoPoint, NewLocation

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 50
RATING_MIN = 0.0
RATING_MAX = 5.0


def _as_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        # json integers are unbounded, float() overflows on the huge ones
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"{field} must be a number", field=field) from exc
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a number", field=field)
    return number


def validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required", field="title")
    value = title.strip()
    if len(value) < TITLE_MIN_LENGTH:
        raise ValidationError(
            f"Title must be at least {TITLE_MIN_LENGTH} characters long", field="title"
        )
    if len(value) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters long", field="title"
        )
    return value


def validate_rating(rating: Any) -> float:
    if rating is None or rating == "":
        raise ValidationError("Rating is required", field="rating")
    value = _as_number(rating, "rating")
    if not RATING_MIN <= value <= RATING_MAX:
        raise ValidationError("Rating must be between 0 and 5", field="rating")
    return value


def validate_point(location: Any) -> GeoPoint:
    coordinates = location.get("coordinates") if isinstance(location, Mapping) else None
    if coordinates is None:
        raise ValidationError("Coordinates are required", field="location.coordinates")
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) != 2:
        raise ValidationError(
            "Coordinates must be a [longitude, latitude] pair", field="location.coordinates"
        )
    longitude = _as_number(coordinates[0], "location.coordinates")
    latitude = _as_number(coordinates[1], "location.coordinates")
    return GeoPoint(longitude=longitude, latitude=latitude)


def validate_price(price: Any) -> float | None:
    # html number inputs post "" when left empty
    if price is None or price == "":
        return None
    value = _as_number(price, "price")
    if value < 0:
        raise ValidationError("Price must be a non-negative number", field="price")
    return value


def validate_description(description: Any) -> str | None:
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValidationError("Description must be text", field="description")
    return description.strip() or None


def validate_new_location(fields: Mapping[str, Any], *, owner_id: int) -> NewLocation:
    title = validate_title(fields.get("title"))
    rating = validate_rating(fields.get("rating"))
    point = validate_point(fields.get("location"))
    price = validate_price(fields.get("price"))
    description = validate_description(fields.get("description"))
    return NewLocation(
        title=title,
        description=description,
        rating=rating,
        price=price,
        point=point,
        created_by=owner_id,
    )
