# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from inkpress.domain.users.entities import User
from inkpress.domain.users.exceptions import (
    AccountDisabledError,
    CredentialsRequiredError,
    InvalidCredentialsError,
    LoginRateLimitedError,
)
from inkpress.domain.users.repositories import PasswordHasher, UserRepository
from inkpress.infrastructure.auth.login_attempts import LoginRateLimiter
from inkpress.infrastructure.auth.session_codec import SessionCodec
from inkpress.shared.logging import logger
from inkpress.shared.middleware.csrf import generate_csrf_token
from inkpress.shared.middleware.request_gate import DEFAULT_LANDING, LOGIN_PATH


def safe_redirect_target(raw: str | None) -> str:
    """Return ``raw`` when it is a same-origin path that is not the login page."""
    if not raw or not raw.startswith("/"):
        return DEFAULT_LANDING
    # Browsers drop tabs and newlines, so "/\t/host" would become "//host".
    if any(c.isspace() or ord(c) < 0x20 or ord(c) == 0x7F for c in raw):
        return DEFAULT_LANDING
    if raw.startswith("//") or raw.startswith("/\\"):
        return DEFAULT_LANDING
    parts = urlsplit(raw)
    if parts.scheme or parts.netloc:
        return DEFAULT_LANDING
    if raw == LOGIN_PATH or raw.startswith(LOGIN_PATH + "?"):
        return DEFAULT_LANDING
    return raw


@dataclass(slots=True, frozen=True)
class LoginResult:
    session_token: str
    csrf_token: str
    next_path: str
    user: User


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        codec: SessionCodec,
        limiter: LoginRateLimiter,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._codec = codec
        self._limiter = limiter

    def execute(
        self,
        username: str | None,
        password: str | None,
        from_path: str | None = None,
        client_id: str = "unknown",
    ) -> LoginResult:
        if not self._limiter.register_attempt(client_id):
            raise LoginRateLimitedError(
                context={"window_attempts": self._limiter.max_attempts}
            )

        username = (username or "").strip()
        if not username or not password:
            raise CredentialsRequiredError()

        user = self._users.find_by_username(username)
        if user is None or not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"login: rejected credentials for client={client_id}")
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.info(f"login: disabled account user_id={user.id}")
            raise AccountDisabledError()

        token = self._codec.sign(user.id, user.username, user.role)
        logger.info(f"login: user_id={user.id} role={user.role.value} authenticated")
        return LoginResult(
            session_token=token,
            csrf_token=generate_csrf_token(),
            next_path=safe_redirect_target(from_path),
            user=user,
        )
