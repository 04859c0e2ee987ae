from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from mapmarks.domain.locations.entities import Location


class PointDTO(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float]


class PositionDTO(BaseModel):
    lat: float
    lng: float


class OwnerDTO(BaseModel):
    id: int
    username: str


class LocationOutDTO(BaseModel):
    id: int
    title: str
    description: str | None
    rating: float
    price: float | None
    location: PointDTO
    position: PositionDTO
    created_by: OwnerDTO = Field(serialization_alias="createdBy")
    created_at: datetime = Field(serialization_alias="createdAt")

    @classmethod
    def from_domain(cls, location: Location) -> LocationOutDTO:
        lat, lng = location.point.as_lat_lng()
        return cls(
            id=location.id,
            title=location.title,
            description=location.description,
            rating=location.rating,
            price=location.price,
            location=PointDTO(coordinates=location.point.to_coordinates()),
            position=PositionDTO(lat=lat, lng=lng),
            created_by=OwnerDTO(id=location.created_by.id, username=location.created_by.username),
            created_at=location.created_at,
        )

    def to_json(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)
