# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from inkpress.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT


class EmailAlreadyUsedError(DomainError):
    code = "email_already_used"
    status = HTTPStatus.CONFLICT


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND


class CredentialsRequiredError(DomainError):
    code = "credentials_required"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class AccountDisabledError(DomainError):
    code = "account_disabled"
    status = HTTPStatus.FORBIDDEN


class LoginRateLimitedError(DomainError):
    code = "rate_limited"
    status = HTTPStatus.TOO_MANY_REQUESTS


class LastAdminError(DomainError):
    code = "last_admin"
    status = HTTPStatus.CONFLICT


class SelfDeletionError(DomainError):
    code = "cannot_delete_self"
    status = HTTPStatus.CONFLICT
