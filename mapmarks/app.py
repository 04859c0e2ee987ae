# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys

from flask import Flask
from flask_cors import CORS
from sqlalchemy.exc import OperationalError

from mapmarks.infrastructure.container import Container, container as default_container
from mapmarks.infrastructure.db import init_db, wait_for_database
from mapmarks.shared.config import load_config
from mapmarks.shared.errors import register_error_handler
from mapmarks.shared.logging import logger, setup_logging
from mapmarks.shared.middleware.request_logger import configure_request_logging

_config = load_config()


def _bootstrap_database() -> None:
    try:
        wait_for_database()
    except OperationalError as exc:
        logger.critical(
            f"db.connect: giving up after {_config.database.connect_retries + 1} attempts "
            f"({type(exc).__name__})"
        )
        sys.exit(1)
    init_db()


def create_app(container: Container | None = None) -> Flask:
    setup_logging(debug_mode=_config.debug_logging)
    _bootstrap_database()

    container = container or default_container

    app = Flask(__name__)
    register_error_handler(app)
    configure_request_logging(app)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": _config.security.allowed_origins}}
    }
    if any(o != "*" for o in _config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())
    app.register_blueprint(container.locations_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault("Cache-Control", "no-store")

        # geolocation stays allowed for the map
        resp.headers.setdefault(
            "Permissions-Policy",
            "microphone=(), camera=(), payment=(), usb=()",
        )

        if _config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
