# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify, request

from inkpress.shared.logging import logger
from inkpress.shared.middleware.request_gate import CookiePatch

THEME_COOKIE = "theme"
THEME_COOKIE_MAX_AGE = 60 * 60 * 24 * 180
THEMES: frozenset[str] = frozenset({"light", "dark", "system"})
DEFAULT_THEME = "system"


class ThemeController:
    def __init__(self, *, secure_cookies: bool = False) -> None:
        self._secure = secure_cookies

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("theme", __name__, url_prefix="/api/theme")
        bp.add_url_rule("", view_func=self.get_theme, methods=["GET"], endpoint="get")
        bp.add_url_rule("", view_func=self.set_theme, methods=["POST"], endpoint="set")
        return bp

    def get_theme(self):
        return jsonify({"theme": request.cookies.get(THEME_COOKIE) or DEFAULT_THEME})

    def set_theme(self):
        body = request.get_json(silent=True)
        theme = str((body or {}).get("theme") or "") if isinstance(body, dict) else ""
        if theme not in THEMES:
            logger.debug(f"theme: rejected value {theme!r}")
            return jsonify({"ok": False, "message": "invalid_theme"}), 400

        response = jsonify({"ok": True})
        CookiePatch(
            name=THEME_COOKIE,
            value=theme,
            max_age=THEME_COOKIE_MAX_AGE,
            secure=self._secure,
        ).apply(response)
        return response
