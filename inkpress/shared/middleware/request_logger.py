# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

from flask import Flask, Response, g, request

from inkpress.shared.logging import clear_correlation_id, logger, set_correlation_id

SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {"authorization", "cookie", "set-cookie", "x-csrf-token"}
)
SENSITIVE_PARAMS: tuple[str, ...] = ("password", "token", "csrf", "secret", "session")


def _client_ip(trust_proxy: bool) -> str:
    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For", "")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _user_id() -> str | None:
    claims = getattr(g, "session_claims", None)
    return claims.subject if claims is not None else None


def _sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            sanitized[key] = f"<hashed:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"
        else:
            sanitized[key] = value
    return sanitized


def _sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "<redacted>" if any(s in key.lower() for s in SENSITIVE_PARAMS) else value
        for key, value in params.items()
    }


def configure_request_logging(
    app: Flask, *, debug_mode: bool = False, trust_proxy: bool = False
) -> None:
    @app.before_request
    def _before_request() -> None:
        set_correlation_id(secrets.token_urlsafe(8))
        g.request_start_time = time.time()

        ip_address = _client_ip(trust_proxy)
        if debug_mode:
            logger.info(
                f"Request started: {request.method} {request.path} from {ip_address}, "
                f"query={_sanitize_query_params(dict(request.args))}, "
                f"headers={_sanitize_headers(dict(request.headers))}"
            )
        else:
            logger.info(f"Request: {request.method} {request.path} from {ip_address}")

    @app.after_request
    def _after_request(response: Response) -> Response:
        duration = time.time() - getattr(g, "request_start_time", time.time())
        logger.info(
            f"Response: {request.method} {request.path} status={response.status_code}, "
            f"duration={duration:.3f}s, user={_user_id()}"
        )
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(
                f"Request error: {type(exc).__name__} on {request.method} {request.path}"
            )
        clear_correlation_id()


__all__ = ["configure_request_logging"]
