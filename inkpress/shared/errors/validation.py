# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def invalid_fields(exc: PydanticValidationError) -> list[str]:
    """Dotted field paths that failed; submitted values are never echoed back."""
    fields = {
        ".".join(str(part) for part in error.get("loc", ()) if part is not None)
        for error in exc.errors(include_url=False, include_input=False)
    }
    return sorted(field or "body" for field in fields)


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    context: dict[str, Any] = {"fields": invalid_fields(exc)}
    raise ValidationError("validation_error", context=context) from exc


__all__ = ["invalid_fields", "raise_validation_error"]
