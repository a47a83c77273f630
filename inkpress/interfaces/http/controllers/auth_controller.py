# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, g, jsonify, redirect, request

from inkpress.application.use_cases.users.login_user import LoginUserUseCase
from inkpress.domain.users.exceptions import LoginRateLimitedError
from inkpress.infrastructure.action_guard import action_payload
from inkpress.infrastructure.audit import AuditAction, audit_log
from inkpress.infrastructure.auth.login_attempts import client_identity
from inkpress.interfaces.http.dto.auth import LoginRequestDTO
from inkpress.interfaces.http.dto.common import parse_dto
from inkpress.shared.errors.base import AppError
from inkpress.shared.logging import logger
from inkpress.shared.middleware.csrf import CSRF_COOKIE
from inkpress.shared.middleware.request_gate import (
    AUTH_COOKIE_MAX_AGE,
    LOGIN_PATH,
    SESSION_COOKIE,
    CookiePatch,
)


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        secure_cookies: bool = False,
        trust_proxy_headers: bool = False,
    ) -> None:
        self._login_use_case = login_use_case
        self._secure = secure_cookies
        self._trust_proxy = trust_proxy_headers

    def _auth_cookies(self, session_token: str, csrf_token: str, max_age: int) -> tuple[CookiePatch, ...]:
        return (
            CookiePatch(
                name=SESSION_COOKIE,
                value=session_token,
                max_age=max_age,
                http_only=True,
                secure=self._secure,
            ),
            CookiePatch(
                name=CSRF_COOKIE,
                value=csrf_token,
                max_age=max_age,
                http_only=False,
                secure=self._secure,
            ),
        )

    def login(self) -> Response | tuple[Response, int]:
        dto = parse_dto(LoginRequestDTO, action_payload())
        ip_address = client_identity(request, trust_proxy=self._trust_proxy)

        try:
            result = self._login_use_case.execute(
                dto.username, dto.password, dto.from_path, client_id=ip_address
            )
        except LoginRateLimitedError as exc:
            audit_log(AuditAction.LOGIN_RATE_LIMITED, ip_address=ip_address, success=False)
            return jsonify(exc.to_action_result()), exc.status
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username, "error": exc.code},
                success=False,
            )
            return jsonify(exc.to_action_result()), exc.status

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.user.id,
            ip_address=ip_address,
            details={"username": result.user.username},
        )
        response = redirect(result.next_path, code=HTTPStatus.SEE_OTHER)
        for patch in self._auth_cookies(result.session_token, result.csrf_token, AUTH_COOKIE_MAX_AGE):
            patch.apply(response)
        logger.info(f"auth.login: ok user_id={result.user.id} next={result.next_path}")
        return response

    def logout(self) -> Response:
        claims = getattr(g, "session_claims", None)
        response = redirect(LOGIN_PATH, code=HTTPStatus.SEE_OTHER)
        for patch in self._auth_cookies("", "", 0):
            patch.apply(response)

        audit_log(
            AuditAction.LOGOUT,
            user_id=claims.subject if claims else None,
            ip_address=client_identity(request, trust_proxy=self._trust_proxy),
        )
        logger.info("auth.logout: ok")
        return response

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__)
        bp.add_url_rule(LOGIN_PATH, view_func=self.login, methods=["POST"], endpoint="login")
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"], endpoint="logout")
        return bp
