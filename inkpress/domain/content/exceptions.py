# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from inkpress.shared.errors.base import DomainError


class PostNotFoundError(DomainError):
    code = "post_not_found"
    status = HTTPStatus.NOT_FOUND


class ProjectNotFoundError(DomainError):
    code = "project_not_found"
    status = HTTPStatus.NOT_FOUND


class CategoryNotFoundError(DomainError):
    code = "category_not_found"
    status = HTTPStatus.NOT_FOUND


class CategoryInUseError(DomainError):
    code = "category_in_use"
    status = HTTPStatus.CONFLICT
