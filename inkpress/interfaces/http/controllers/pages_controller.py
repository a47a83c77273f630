# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from inkpress.application.use_cases.users.login_user import safe_redirect_target
from inkpress.domain.content.repositories import (
    CategoryRepository,
    PostRepository,
    ProjectRepository,
)
from inkpress.shared.middleware.request_gate import LOGIN_PATH


class PagesController:
    """JSON stand-ins for the login page and the admin dashboard."""

    def __init__(
        self,
        *,
        posts: PostRepository,
        projects: ProjectRepository,
        categories: CategoryRepository,
    ) -> None:
        self._posts = posts
        self._projects = projects
        self._categories = categories

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("pages", __name__)
        bp.add_url_rule(LOGIN_PATH, view_func=self.login_page, methods=["GET"], endpoint="login")
        bp.add_url_rule("/dashboard", view_func=self.dashboard, methods=["GET"], endpoint="dashboard")
        return bp

    def login_page(self):
        return jsonify(
            {
                "page": "login",
                "locale": getattr(g, "locale", None),
                "next": safe_redirect_target(request.args.get("from")),
            }
        )

    def dashboard(self):
        claims = g.session_claims
        _, post_total = self._posts.list(limit=1)
        return jsonify(
            {
                "page": "dashboard",
                "locale": getattr(g, "locale", None),
                "user": {
                    "id": claims.subject,
                    "username": claims.username,
                    "role": claims.role.value,
                },
                "counts": {
                    "posts": post_total,
                    "projects": len(self._projects.list()),
                    "categories": len(self._categories.list()),
                },
            }
        )
