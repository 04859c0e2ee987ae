# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import GeoPoint, Location, LocationCursor, NewLocation, Owner
from .exceptions import ForbiddenError, LocationNotFoundError
from .repositories import DeleteOutcome, LocationRepository

__all__ = [
    "DeleteOutcome",
    "ForbiddenError",
    "GeoPoint",
    "Location",
    "LocationCursor",
    "LocationNotFoundError",
    "LocationRepository",
    "NewLocation",
    "Owner",
]
