# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from inkpress.shared.logging import logger

from .base import AppError

_MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _wants_action_result() -> bool:
    return request.method in _MUTATING_METHODS


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    """Mutations answer with the ``{ok, message}`` envelope, reads with ``{error}``."""
    body = error.to_action_result() if _wants_action_result() else error.to_dict()
    return jsonify(body), error.status


def register_error_handler(app: Flask, *, debug_mode: bool = False) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.info(f"errors: {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        if exc.code is None or exc.code < 400 or not request.path.startswith("/api/"):
            return exc
        code = (exc.name or "http_error").lower().replace(" ", "_")
        return jsonify({"error": code}), exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        identity = getattr(g, "identity", None)
        user_id = identity.subject if identity is not None else None

        if debug_mode:
            logger.exception(
                f"errors: unhandled {type(exc).__name__} on {request.method} {request.path} "
                f"user={user_id} args={dict(request.args)}"
            )
        else:
            logger.error(
                f"errors: unhandled {type(exc).__name__} on {request.method} {request.path}"
            )

        if _wants_action_result():
            return jsonify({"ok": False, "message": "internal_error"}), 500
        return jsonify({"error": "internal_error"}), 500


__all__ = ["handle_app_error", "register_error_handler"]
