# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Collection

LOCALE_COOKIE = "locale"
LOCALE_HEADER = "X-Inkpress-Locale"
LOCALE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def parse_accept_language(header: str | None, supported: Collection[str]) -> str | None:
    """Pick the first supported primary subtag in header order.

    Quality values are ignored: ``zh-CN,zh;q=0.9,en;q=0.8`` yields ``zh``.
    """
    if not header:
        return None
    for segment in header.split(","):
        tag = segment.strip().lower().split(";")[0]
        primary = tag.split("-")[0].strip()
        if primary and primary in supported:
            return primary
    return None


def resolve_locale(
    cookie_value: str | None,
    accept_language: str | None,
    supported: Collection[str],
    default: str,
) -> str:
    if cookie_value and cookie_value in supported:
        return cookie_value
    return parse_accept_language(accept_language, supported) or default


__all__ = [
    "LOCALE_COOKIE",
    "LOCALE_COOKIE_MAX_AGE",
    "LOCALE_HEADER",
    "parse_accept_language",
    "resolve_locale",
]
