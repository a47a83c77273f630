# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoginRequestDTO(BaseModel):
    """Presence checks happen after rate limiting, so nothing here can fail."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=False)

    username: str = ""
    password: str = ""
    from_path: str | None = Field(default=None, alias="from")

    @field_validator("username", "password", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("from_path", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None
