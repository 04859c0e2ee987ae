# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from mapmarks.shared.errors.base import AuthorizationError, NotFoundError


class LocationNotFoundError(NotFoundError):
    code = "location_not_found"
    message = "Location not found"


class ForbiddenError(AuthorizationError):
    code = "forbidden"
    message = "Not authorized to delete this location"
