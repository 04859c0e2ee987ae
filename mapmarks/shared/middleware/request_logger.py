# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request correlation id and access logging."""

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from mapmarks.shared.config import load_config
from mapmarks.shared.logging import (
    clear_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
)

REQUEST_ID_HEADER = "X-Request-ID"
_HIDDEN_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})
_HIDDEN_PARAMS = ("password", "token", "secret", "sid")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _user_id() -> int | None:
    identity = getattr(g, "identity", None)
    return identity.user_id if identity is not None else None


def _visible_headers() -> dict[str, str]:
    return {
        name: ("<hidden>" if name.lower() in _HIDDEN_HEADERS else value)
        for name, value in request.headers.items()
    }


def _visible_params() -> dict[str, str]:
    return {
        name: ("<hidden>" if any(key in name.lower() for key in _HIDDEN_PARAMS) else value)
        for name, value in request.args.items()
    }


def configure_request_logging(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.before_request
    def _open_request() -> None:
        set_correlation_id(request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(6))
        g.request_started = time.perf_counter()
        if verbose:
            logger.debug(
                f"-> {request.method} {request.path} from {_client_ip()} "
                f"query={_visible_params()} headers={_visible_headers()} "
                f"body_size={request.content_length or 0}"
            )

    @app.after_request
    def _close_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        response.headers.setdefault(REQUEST_ID_HEADER, get_correlation_id())
        message = (
            f"<- {request.method} {request.path} {response.status_code} "
            f"in {elapsed_ms:.1f}ms user={_user_id()}"
        )
        if verbose:
            message += f" ip={_client_ip()}"
        logger.info(message)
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request error: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["configure_request_logging"]
