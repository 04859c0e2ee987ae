# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.orm import Session, joinedload

from mapmarks.domain.locations.entities import GeoPoint, LocationCursor, NewLocation, Owner
from mapmarks.domain.locations.entities import Location as DomainLocation
from mapmarks.domain.locations.repositories import DeleteOutcome, LocationRepository
from mapmarks.infrastructure.db.models import Location
from mapmarks.infrastructure.timestamps import as_utc
from mapmarks.infrastructure.unit_of_work import unit_of_work_scope

_LIKE_ESCAPE = "\\"


def _like_pattern(query: str) -> str:
    escaped = (
        query.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _to_domain(row: Location) -> DomainLocation:
    return DomainLocation(
        id=row.id,
        title=row.title,
        description=row.description,
        rating=row.rating,
        price=row.price,
        point=GeoPoint(longitude=row.longitude, latitude=row.latitude),
        created_by=Owner(id=row.owner.id, username=row.owner.username),
        created_at=as_utc(row.created_at),
    )


class SqlAlchemyLocationRepository(LocationRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def add(self, location: NewLocation) -> DomainLocation:
        with unit_of_work_scope(
            self._session_factory, "locations.add", user_id=location.created_by
        ) as session:
            row = Location(
                title=location.title,
                description=location.description,
                rating=location.rating,
                price=location.price,
                longitude=location.point.longitude,
                latitude=location.point.latitude,
                created_by=location.created_by,
            )
            session.add(row)
            session.flush()
            session.refresh(row, attribute_names=["owner"])
            return _to_domain(row)

    def find_by_id(self, location_id: int) -> DomainLocation | None:
        stmt = (
            select(Location).options(joinedload(Location.owner)).where(Location.id == location_id)
        )
        with unit_of_work_scope(
            self._session_factory, "locations.find_by_id", location_id=location_id
        ) as session:
            row = session.scalars(stmt).first()
            return _to_domain(row) if row else None

    def list_page(
        self,
        *,
        after: LocationCursor | None,
        limit: int,
        query: str | None = None,
    ) -> Sequence[DomainLocation]:
        stmt = (
            select(Location)
            .options(joinedload(Location.owner))
            .order_by(Location.created_at.desc(), Location.id.desc())
            .limit(limit)
        )
        if after is not None:
            stmt = stmt.where(
                or_(
                    Location.created_at < after.created_at,
                    and_(Location.created_at == after.created_at, Location.id < after.id),
                )
            )
        if query:
            pattern = _like_pattern(query)
            stmt = stmt.where(
                or_(
                    Location.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    Location.description.ilike(pattern, escape=_LIKE_ESCAPE),
                )
            )
        with unit_of_work_scope(
            self._session_factory,
            "locations.list_page",
            after_id=after.id if after else None,
        ) as session:
            return [_to_domain(row) for row in session.scalars(stmt).unique()]

    def delete_owned(self, location_id: int, owner_id: int) -> DeleteOutcome:
        with unit_of_work_scope(
            self._session_factory,
            "locations.delete_owned",
            location_id=location_id,
            user_id=owner_id,
        ) as session:
            result = session.execute(
                delete(Location).where(Location.id == location_id, Location.created_by == owner_id)
            )
            if result.rowcount:
                return DeleteOutcome.DELETED
            exists = session.scalar(select(Location.id).where(Location.id == location_id))
            return DeleteOutcome.FORBIDDEN if exists is not None else DeleteOutcome.NOT_FOUND
