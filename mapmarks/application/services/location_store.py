# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from mapmarks.domain.locations.entities import Location, LocationCursor
from mapmarks.domain.locations.exceptions import ForbiddenError, LocationNotFoundError
from mapmarks.domain.locations.repositories import DeleteOutcome, LocationRepository
from mapmarks.domain.locations.validation import validate_new_location
from mapmarks.domain.users.entities import Identity
from mapmarks.shared.logging import logger

DEFAULT_BATCH_SIZE = 100
# primary keys are signed 64-bit in every supported backend
MAX_LOCATION_ID = 2**63 - 1


def _storable(location_id: int) -> bool:
    return 1 <= location_id <= MAX_LOCATION_ID


class LocationListing:
    """Newest-first view over every stored location.

    Iterating runs the query from the start, pulling ``batch_size`` rows at a
    time, so the same listing can be walked again and reflects the store as
    it is at that moment.
    """

    def __init__(
        self,
        repository: LocationRepository,
        *,
        query: str | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._repository = repository
        self._query = (query or "").strip() or None
        self._batch_size = max(1, batch_size)

    def __iter__(self) -> Iterator[Location]:
        cursor: LocationCursor | None = None
        while True:
            page = self._repository.list_page(
                after=cursor, limit=self._batch_size, query=self._query
            )
            yield from page
            if len(page) < self._batch_size:
                return
            cursor = LocationCursor.after(page[-1])

    def page(self, *, after: LocationCursor | None = None, limit: int) -> list[Location]:
        return list(self._repository.list_page(after=after, limit=limit, query=self._query))


class LocationStore:
    def __init__(self, *, locations: LocationRepository) -> None:
        self._locations = locations

    def create(self, owner: Identity, fields: Mapping[str, Any]) -> Location:
        new_location = validate_new_location(fields, owner_id=owner.user_id)
        location = self._locations.add(new_location)
        logger.info(f"locations.create: ok (location_id={location.id}, user_id={owner.user_id})")
        return location

    def list(self, query: str | None = None) -> LocationListing:
        return LocationListing(self._locations, query=query)

    def get_by_id(self, location_id: int) -> Location:
        location = (
            self._locations.find_by_id(location_id) if _storable(location_id) else None
        )
        if location is None:
            raise LocationNotFoundError(context={"location_id": location_id})
        return location

    def delete(self, location_id: int, requester: Identity) -> None:
        if not _storable(location_id):
            raise LocationNotFoundError(context={"location_id": location_id})
        outcome = self._locations.delete_owned(location_id, requester.user_id)
        if outcome is DeleteOutcome.NOT_FOUND:
            raise LocationNotFoundError(context={"location_id": location_id})
        if outcome is DeleteOutcome.FORBIDDEN:
            logger.warning(
                f"locations.delete: forbidden (location_id={location_id}, "
                f"user_id={requester.user_id})"
            )
            raise ForbiddenError(context={"location_id": location_id})
        logger.info(
            f"locations.delete: ok (location_id={location_id}, user_id={requester.user_id})"
        )
