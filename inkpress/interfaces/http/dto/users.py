# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkpress.domain.users.entities import User

from .common import form_flag


class CreateUserRequestDTO(BaseModel):
    username: str = ""
    password: str = ""
    email: str | None = None
    role: str = "user"


class UpdateUserRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(default="", alias="userId")
    email: str | None = None
    role: str | None = None
    is_active: bool = Field(default=False, alias="isActive")

    @field_validator("is_active", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return form_flag(value)


class ChangePasswordRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(default="", alias="userId")
    new_password: str = Field(default="", alias="newPassword")


class DeleteUserRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(default="", alias="userId")


class UserSummaryDTO(BaseModel):
    id: str
    username: str
    email: str | None
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> UserSummaryDTO:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role.value,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
