# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, self-contained session tokens (HS256 JWT)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from inkpress.domain.users.entities import Role, SessionClaims
from inkpress.shared.errors.base import InfrastructureError
from inkpress.shared.logging import logger

DEFAULT_SESSION_TTL = timedelta(hours=8)
ALGORITHM = "HS256"

MIN_PRODUCTION_SECRET_LENGTH = 32
PLACEHOLDER_MARKERS: tuple[str, ...] = ("dev-secret", "change-me", "test")


class SecretMisconfiguredError(InfrastructureError):
    def __init__(self, reason: str) -> None:
        super().__init__(code="secret_misconfigured", context={"reason": reason})


def validate_secret(secret: str | None, *, production: bool) -> str:
    if not secret:
        raise SecretMisconfiguredError(
            "AUTH_SECRET is not set; generate one with `python -m inkpress.scripts.generate_secret`"
        )
    if production:
        if len(secret) < MIN_PRODUCTION_SECRET_LENGTH:
            raise SecretMisconfiguredError(
                f"AUTH_SECRET must be at least {MIN_PRODUCTION_SECRET_LENGTH} characters in production"
            )
        lowered = secret.lower()
        if any(marker in lowered for marker in PLACEHOLDER_MARKERS):
            raise SecretMisconfiguredError("AUTH_SECRET looks like a placeholder value")
    return secret


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionCodec:
    def __init__(
        self,
        secret: str | None,
        *,
        production: bool = False,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret = validate_secret(secret, production=production)
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def sign(
        self,
        subject: str,
        username: str,
        role: Role | str,
        ttl: timedelta | None = None,
    ) -> str:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + (ttl if ttl is not None else self._ttl)
        payload = {
            "sub": subject,
            "username": username,
            "role": Role(role).value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(
            payload, self._secret, algorithm=ALGORITHM, headers={"typ": "JWT"}
        )

    def verify(self, token: str | None) -> SessionClaims | None:
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": ["sub", "iat", "exp"],
                    # Expiry is checked against the injected clock below.
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
            if self._clock() >= expires_at:
                return None
            subject = str(payload["sub"])
            if not subject:
                return None
            return SessionClaims(
                subject=subject,
                username=str(payload.get("username", "")),
                role=Role(payload.get("role")),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
                expires_at=expires_at,
            )
        except (jwt.PyJWTError, ValueError, TypeError, KeyError) as exc:
            logger.debug(f"session: rejected token ({type(exc).__name__})")
            return None


__all__ = [
    "DEFAULT_SESSION_TTL",
    "SecretMisconfiguredError",
    "SessionCodec",
    "validate_secret",
]
