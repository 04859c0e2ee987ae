# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from mapmarks.application.services.location_store import LocationStore
from mapmarks.interfaces.http.dto.auth import MessageDTO
from mapmarks.interfaces.http.dto.locations import LocationOutDTO
from mapmarks.interfaces.http.middleware.access import AccessGuard, current_identity
from mapmarks.shared.errors import ValidationError


class LocationsController:
    def __init__(self, *, store: LocationStore, guard: AccessGuard) -> None:
        self._store = store
        self._guard = guard

    def create(self) -> tuple[Response, int]:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object", field="body")

        location = self._store.create(current_identity(), body)
        return jsonify(LocationOutDTO.from_domain(location).to_json()), HTTPStatus.CREATED

    def list(self) -> tuple[Response, int]:
        listing = self._store.list(request.args.get("q"))
        return jsonify([LocationOutDTO.from_domain(item).to_json() for item in listing]), (
            HTTPStatus.OK
        )

    def get(self, location_id: int) -> tuple[Response, int]:
        location = self._store.get_by_id(location_id)
        return jsonify(LocationOutDTO.from_domain(location).to_json()), HTTPStatus.OK

    def delete(self, location_id: int) -> tuple[Response, int]:
        self._store.delete(location_id, current_identity())
        payload = MessageDTO(message="Location deleted successfully").model_dump()
        return jsonify(payload), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("locations", __name__, url_prefix="/api/locations")
        guarded = self._guard.auth_required
        bp.add_url_rule("", view_func=self.list, methods=["GET"])
        bp.add_url_rule("", view_func=guarded(self.create), methods=["POST"])
        bp.add_url_rule("/<int:location_id>", view_func=self.get, methods=["GET"])
        bp.add_url_rule(
            "/<int:location_id>", view_func=guarded(self.delete), methods=["DELETE"]
        )
        return bp
