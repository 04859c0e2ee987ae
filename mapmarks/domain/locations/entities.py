# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Location markers and their geographic points."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from mapmarks.shared.errors.base import ValidationError

LONGITUDE_RANGE = (-180.0, 180.0)
LATITUDE_RANGE = (-90.0, 90.0)


@dataclass(slots=True, frozen=True)
class GeoPoint:
    """Point stored longitude-first.

    Map widgets speak (latitude, longitude); ``as_lat_lng`` is the only
    place the order flips.
    """

    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        low, high = LONGITUDE_RANGE
        if not low <= self.longitude <= high:
            raise ValidationError(
                "Longitude must be between -180 and 180", field="location.coordinates"
            )
        low, high = LATITUDE_RANGE
        if not low <= self.latitude <= high:
            raise ValidationError(
                "Latitude must be between -90 and 90", field="location.coordinates"
            )

    def to_coordinates(self) -> list[float]:
        return [self.longitude, self.latitude]

    def as_lat_lng(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(slots=True, frozen=True)
class Owner:
    id: int
    username: str


@dataclass(slots=True, frozen=True)
class NewLocation:
    """Validated fields of a marker that has not been persisted yet."""

    title: str
    description: str | None
    rating: float
    price: float | None
    point: GeoPoint
    created_by: int


@dataclass(slots=True, frozen=True)
class Location:
    id: int
    title: str
    description: str | None
    rating: float
    price: float | None
    point: GeoPoint
    created_by: Owner
    created_at: datetime


@dataclass(slots=True, frozen=True)
class LocationCursor:
    """Keyset position in the newest-first ordering."""

    created_at: datetime
    id: int

    @classmethod
    def after(cls, location: Location) -> LocationCursor:
        return cls(created_at=location.created_at, id=location.id)
