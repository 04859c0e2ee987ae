# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import enum
from collections.abc import Sequence
from typing import Protocol

from .entities import Location, LocationCursor, NewLocation


class DeleteOutcome(enum.Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class LocationRepository(Protocol):
    def add(self, location: NewLocation) -> Location: ...

    def find_by_id(self, location_id: int) -> Location | None: ...

    def list_page(
        self,
        *,
        after: LocationCursor | None,
        limit: int,
        query: str | None = None,
    ) -> Sequence[Location]: ...

    def delete_owned(self, location_id: int, owner_id: int) -> DeleteOutcome: ...
