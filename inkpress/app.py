# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from inkpress.infrastructure.action_guard import CONTAINER_EXTENSION
from inkpress.infrastructure.container import Container
from inkpress.infrastructure.db import Database
from inkpress.shared.config import AppConfig, load_config
from inkpress.shared.logging import logger, setup_logging
from inkpress.shared.middleware.error_handler import configure_error_handling
from inkpress.shared.middleware.request_gate import configure_request_gate
from inkpress.shared.middleware.request_logger import configure_request_logging


def _configure_security_headers(app: Flask, config: AppConfig) -> None:
    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
        )
        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )
        return resp


def create_app(config: AppConfig | None = None, *, database: Database | None = None) -> Flask:
    config = config or load_config()
    setup_logging(debug_mode=config.debug_logging)

    container = Container(config, database=database)
    # Fails fast on a missing or weak AUTH_SECRET.
    gate = container.request_gate
    container.database.init_schema()

    app = Flask(__name__)
    app.extensions[CONTAINER_EXTENSION] = container

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(
        app,
        debug_mode=config.debug_logging,
        trust_proxy=config.security.trust_proxy_headers,
    )
    configure_request_gate(app, gate)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    for controller in container.controllers():
        app.register_blueprint(controller.as_blueprint())

    _configure_security_headers(app, config)

    @app.teardown_appcontext
    def _remove_session(_exc: BaseException | None) -> None:
        container.database.remove_session()

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=5000, debug=False)
