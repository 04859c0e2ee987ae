# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Session-cookie authentication for Flask views."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import Request, g, request

from mapmarks.application.services.sessions import SessionIssuer
from mapmarks.domain.users.entities import Identity
from mapmarks.shared.errors import AuthenticationError
from mapmarks.shared.logging import logger

F = TypeVar("F", bound=Callable[..., Any])


def current_identity() -> Identity:
    identity = getattr(g, "identity", None)
    if identity is None:
        raise AuthenticationError()
    return cast(Identity, identity)


class AccessGuard:
    def __init__(self, *, issuer: SessionIssuer, cookie_name: str = "sid") -> None:
        self._issuer = issuer
        self._cookie_name = cookie_name

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def session_id(self, req: Request) -> str | None:
        return req.cookies.get(self._cookie_name) or None

    def authenticate(self, req: Request) -> Identity:
        try:
            identity = self._issuer.validate(self.session_id(req))
        except AuthenticationError as exc:
            logger.warning(f"Auth failed ({exc.code}) on {req.method} {req.path}")
            raise
        g.identity = identity
        logger.debug(f"Auth OK: user={identity.user_id} {req.method} {req.path}")
        return identity

    def auth_required(self, view: F) -> F:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            self.authenticate(request)
            return view(*args, **kwargs)

        return cast(F, inner)


__all__ = ["AccessGuard", "current_identity"]
