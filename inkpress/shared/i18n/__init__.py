# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .locale import (
    LOCALE_COOKIE,
    LOCALE_COOKIE_MAX_AGE,
    LOCALE_HEADER,
    parse_accept_language,
    resolve_locale,
)

__all__ = [
    "LOCALE_COOKIE",
    "LOCALE_COOKIE_MAX_AGE",
    "LOCALE_HEADER",
    "parse_accept_language",
    "resolve_locale",
]
