# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Double-submit cookie CSRF tokens.

The token lives in a non-httpOnly ``csrf`` cookie that page scripts can read,
and every mutating request has to echo it back either as the ``csrf`` form
field or in the CSRF request header. A request passes only when both copies
are present and identical.
"""

from __future__ import annotations

import hmac
import secrets
from collections.abc import Mapping

CSRF_COOKIE = "csrf"
CSRF_FORM_FIELD = "csrf"
DEFAULT_CSRF_HEADER = "X-CSRF-Token"


def generate_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def verify_csrf(cookie_value: str | None, submitted_value: str | None) -> bool:
    if not cookie_value or not submitted_value:
        return False
    return hmac.compare_digest(
        cookie_value.encode("utf-8"), submitted_value.encode("utf-8")
    )


def submitted_csrf_token(
    form: Mapping[str, object],
    headers: Mapping[str, str],
    header_name: str = DEFAULT_CSRF_HEADER,
) -> str:
    """Return the echoed token, preferring the form field over the header."""
    value = form.get(CSRF_FORM_FIELD)
    token = str(value).strip() if value is not None else ""
    if not token:
        token = (headers.get(header_name) or "").strip()
    return token


__all__ = [
    "CSRF_COOKIE",
    "CSRF_FORM_FIELD",
    "DEFAULT_CSRF_HEADER",
    "generate_csrf_token",
    "submitted_csrf_token",
    "verify_csrf",
]
