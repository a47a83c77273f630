# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from inkpress.shared.errors.validation import raise_validation_error


def form_flag(value: Any) -> bool:
    """HTML forms submit booleans as the literal string ``true``."""
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() == "true"


class ActionResultDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    ok: bool = True
    message: str | None = None
    id: str | None = None


T = TypeVar("T", bound=BaseModel)


def parse_dto(model: type[T], payload: dict[str, Any]) -> T:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise_validation_error(exc)
