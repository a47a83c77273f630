# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Administrative user management.

Every mutation that can remove admin rights re-counts the active admins
immediately before writing, so the last active admin cannot be demoted,
deactivated or deleted.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime

from inkpress.domain.users.entities import Role, User
from inkpress.domain.users.exceptions import (
    EmailAlreadyUsedError,
    LastAdminError,
    SelfDeletionError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from inkpress.domain.users.repositories import PasswordHasher, UserRepository
from inkpress.shared.errors import ValidationError
from inkpress.shared.logging import logger

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def _check_password(password: str | None) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "password_too_short", context={"min_length": MIN_PASSWORD_LENGTH}
        )
    return password


def _normalize_email(email: str | None) -> str | None:
    email = (email or "").strip() or None
    if email is not None and not EMAIL_PATTERN.match(email):
        raise ValidationError("invalid_email")
    return email


def _parse_role(role: str | Role | None, default: Role | None = None) -> Role | None:
    if role is None or role == "":
        return default
    try:
        return Role(role)
    except ValueError:
        raise ValidationError("invalid_role", context={"role": str(role)}) from None


def _ensure_not_last_admin(users: UserRepository, target: User) -> None:
    if target.is_active_admin and users.count_active_admins() <= 1:
        logger.warning(f"users: refused to remove last active admin user_id={target.id}")
        raise LastAdminError(context={"user_id": target.id})


class ListUsersUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self) -> Sequence[User]:
        return sorted(self._users.list_all(), key=lambda u: u.created_at, reverse=True)


class CreateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(
        self,
        username: str | None,
        password: str | None,
        *,
        email: str | None = None,
        role: str | Role | None = None,
    ) -> User:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("credentials_required")
        if not USERNAME_PATTERN.match(username):
            raise ValidationError("invalid_username")
        _check_password(password)
        email = _normalize_email(email)
        resolved_role = _parse_role(role, Role.USER)

        if self._users.find_by_username(username):
            raise UserAlreadyExistsError(context={"username": username})
        if email and self._users.find_by_email(email):
            raise EmailAlreadyUsedError()

        now = datetime.now(UTC)
        user = self._users.add(
            User(
                id="",
                username=username,
                email=email,
                password_hash=self._password_hasher.hash(password),
                role=resolved_role,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(f"users: created user_id={user.id} role={user.role.value}")
        return user


class UpdateUserUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(
        self,
        user_id: str,
        *,
        email: str | None = None,
        role: str | Role | None = None,
        is_active: bool = True,
    ) -> User:
        if not user_id:
            raise ValidationError("user_id_required")
        email = _normalize_email(email)
        target = self._users.find_by_id(user_id)
        if target is None:
            raise UserNotFoundError(context={"user_id": user_id})
        new_role = _parse_role(role, target.role)

        if new_role is not Role.ADMIN or not is_active:
            _ensure_not_last_admin(self._users, target)

        if email:
            owner = self._users.find_by_email(email)
            if owner is not None and owner.id != user_id:
                raise EmailAlreadyUsedError()

        updated = self._users.update(
            replace(
                target,
                email=email,
                role=new_role,
                is_active=is_active,
                updated_at=datetime.now(UTC),
            )
        )
        logger.info(
            f"users: updated user_id={user_id} role={updated.role.value} active={updated.is_active}"
        )
        return updated


class ChangePasswordUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: str, new_password: str | None) -> None:
        if not user_id:
            raise ValidationError("user_id_required")
        _check_password(new_password)
        target = self._users.find_by_id(user_id)
        if target is None:
            raise UserNotFoundError(context={"user_id": user_id})
        self._users.update(
            replace(
                target,
                password_hash=self._password_hasher.hash(new_password),
                updated_at=datetime.now(UTC),
            )
        )
        logger.info(f"users: password changed user_id={user_id}")


class DeleteUserUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, *, actor_id: str) -> None:
        if not user_id:
            raise ValidationError("user_id_required")
        target = self._users.find_by_id(user_id)
        if target is None:
            raise UserNotFoundError(context={"user_id": user_id})
        _ensure_not_last_admin(self._users, target)
        if target.id == actor_id:
            raise SelfDeletionError()
        self._users.delete(user_id)
        logger.info(f"users: deleted user_id={user_id} by={actor_id}")


__all__ = [
    "ChangePasswordUseCase",
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "ListUsersUseCase",
    "UpdateUserUseCase",
]
