# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Authentication and CSRF checks in front of every state-changing action."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import wraps
from http import HTTPStatus
from typing import Any

from flask import current_app, g, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from inkpress.domain.users.entities import Role, SessionClaims
from inkpress.shared.errors.base import AppError
from inkpress.shared.logging import logger
from inkpress.shared.middleware.csrf import (
    CSRF_COOKIE,
    DEFAULT_CSRF_HEADER,
    submitted_csrf_token,
    verify_csrf,
)
from inkpress.shared.middleware.request_gate import SESSION_COOKIE, SessionVerifier

CONTAINER_EXTENSION = "inkpress.container"

NOT_AUTHENTICATED = "not_authenticated"
CSRF_FAILED = "csrf_failed"
FORBIDDEN = "forbidden"

_REASON_STATUS: dict[str, HTTPStatus] = {
    NOT_AUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    CSRF_FAILED: HTTPStatus.FORBIDDEN,
    FORBIDDEN: HTTPStatus.FORBIDDEN,
}


@dataclass(slots=True, frozen=True)
class GuardResult:
    ok: bool
    subject: str | None = None
    username: str | None = None
    role: Role | None = None
    reason: str | None = None

    @classmethod
    def granted(cls, claims: SessionClaims) -> GuardResult:
        return cls(ok=True, subject=claims.subject, username=claims.username, role=claims.role)

    @classmethod
    def denied(cls, reason: str) -> GuardResult:
        return cls(ok=False, reason=reason)

    @property
    def status(self) -> HTTPStatus:
        if self.ok:
            return HTTPStatus.OK
        return _REASON_STATUS.get(self.reason or "", HTTPStatus.FORBIDDEN)

    def to_action_result(self) -> dict[str, Any]:
        return {"ok": False, "message": self.reason}


def verify_session(
    cookies: Mapping[str, str],
    codec: SessionVerifier,
    *,
    admin_only: bool = False,
) -> GuardResult:
    claims = codec.verify(cookies.get(SESSION_COOKIE))
    if claims is None:
        return GuardResult.denied(NOT_AUTHENTICATED)
    if admin_only and not claims.is_admin:
        return GuardResult.denied(FORBIDDEN)
    return GuardResult.granted(claims)


def verify_auth_and_csrf(
    submitted: Mapping[str, object],
    *,
    cookies: Mapping[str, str],
    headers: Mapping[str, str],
    codec: SessionVerifier,
    admin_only: bool = False,
    header_name: str = DEFAULT_CSRF_HEADER,
) -> GuardResult:
    """Session first, then the double-submitted token, then the role."""
    claims = codec.verify(cookies.get(SESSION_COOKIE))
    if claims is None:
        return GuardResult.denied(NOT_AUTHENTICATED)

    token = submitted_csrf_token(submitted, headers, header_name)
    if not verify_csrf(cookies.get(CSRF_COOKIE), token):
        logger.warning(f"action_guard: csrf check failed user_id={claims.subject}")
        return GuardResult.denied(CSRF_FAILED)

    if admin_only and not claims.is_admin:
        logger.warning(f"action_guard: non-admin user_id={claims.subject} refused")
        return GuardResult.denied(FORBIDDEN)

    return GuardResult.granted(claims)


def action_payload() -> dict[str, Any]:
    """Merge the JSON body and form fields of the current request."""
    payload: dict[str, Any] = {}
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        payload.update(body)
    payload.update(request.form.to_dict())
    return payload


def _guard_dependencies() -> tuple[SessionVerifier, str]:
    container = current_app.extensions[CONTAINER_EXTENSION]
    return container.session_codec, container.config.security.csrf_header_name


def _failure(payload: dict[str, Any], status: HTTPStatus):
    return jsonify(payload), status


def require_session(*, admin_only: bool = False) -> Callable:
    """Session (and optionally admin role) check for read-only endpoints."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            codec, _ = _guard_dependencies()
            result = verify_session(request.cookies, codec, admin_only=admin_only)
            if not result.ok:
                return _failure(result.to_action_result(), result.status)
            g.identity = result
            return func(*args, **kwargs)

        return wrapper

    return decorator


def server_action(*, admin_only: bool = False) -> Callable:
    """Run the guard before the action and map its failures to result envelopes."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            codec, header_name = _guard_dependencies()
            result = verify_auth_and_csrf(
                action_payload(),
                cookies=request.cookies,
                headers=request.headers,
                codec=codec,
                admin_only=admin_only,
                header_name=header_name,
            )
            if not result.ok:
                return _failure(result.to_action_result(), result.status)

            g.identity = result
            try:
                return func(*args, **kwargs)
            except AppError as exc:
                logger.info(f"action {func.__name__} rejected: {exc.code}")
                return _failure(exc.to_action_result(), exc.status)
            except IntegrityError:
                logger.exception(f"action {func.__name__}: constraint violation")
                return _failure(
                    {"ok": False, "message": "conflict"}, HTTPStatus.CONFLICT
                )
            except SQLAlchemyError:
                logger.exception(f"action {func.__name__}: persistence failure")
                return _failure(
                    {"ok": False, "message": "persistence_error"},
                    HTTPStatus.INTERNAL_SERVER_ERROR,
                )

        return wrapper

    return decorator


__all__ = [
    "CONTAINER_EXTENSION",
    "CSRF_FAILED",
    "FORBIDDEN",
    "NOT_AUTHENTICATED",
    "GuardResult",
    "action_payload",
    "require_session",
    "server_action",
    "verify_auth_and_csrf",
    "verify_session",
]
