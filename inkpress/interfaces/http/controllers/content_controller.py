# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, g, jsonify, request

from inkpress.application.use_cases.content import (
    CreateCategoryUseCase,
    CreatePostUseCase,
    CreateProjectUseCase,
    DeleteCategoryUseCase,
    DeletePostUseCase,
    DeleteProjectUseCase,
    GetPostUseCase,
    GetProjectUseCase,
    ListCategoriesUseCase,
    ListPostsUseCase,
    ListProjectsUseCase,
    UpdateCategoryUseCase,
    UpdatePostUseCase,
    UpdateProjectUseCase,
)
from inkpress.infrastructure.action_guard import action_payload, server_action
from inkpress.infrastructure.audit import AuditAction, audit_log
from inkpress.interfaces.http.dto.common import ActionResultDTO, form_flag, parse_dto
from inkpress.interfaces.http.dto.content import (
    CategoryDTO,
    CategoryRequestDTO,
    DeleteRequestDTO,
    PostDTO,
    PostRequestDTO,
    ProjectDTO,
    ProjectRequestDTO,
)


def _ok(entity_id: str | None = None, status: HTTPStatus = HTTPStatus.OK):
    return jsonify(ActionResultDTO(id=entity_id).model_dump(exclude_none=True)), status


def _audit(action: AuditAction, entity_id: str) -> None:
    audit_log(
        action,
        user_id=g.identity.subject,
        ip_address=request.remote_addr,
        details={"id": entity_id},
    )


class PostsController:
    def __init__(
        self,
        *,
        list_use_case: ListPostsUseCase,
        get_use_case: GetPostUseCase,
        create_use_case: CreatePostUseCase,
        update_use_case: UpdatePostUseCase,
        delete_use_case: DeletePostUseCase,
    ) -> None:
        self._list = list_use_case
        self._get = get_use_case
        self._create = create_use_case
        self._update = update_use_case
        self._delete = delete_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("posts", __name__, url_prefix="/api/posts")
        bp.add_url_rule("", view_func=self.list_posts, methods=["GET"], endpoint="list")
        bp.add_url_rule("/<post_id>", view_func=self.get_post, methods=["GET"], endpoint="get")
        bp.add_url_rule("", view_func=self.create_post, methods=["POST"], endpoint="create")
        bp.add_url_rule("/update", view_func=self.update_post, methods=["POST"], endpoint="update")
        bp.add_url_rule("/delete", view_func=self.delete_post, methods=["POST"], endpoint="delete")
        return bp

    def list_posts(self):
        featured_raw = request.args.get("featured")
        page = self._list.execute(
            tag=request.args.get("tag") or None,
            featured=form_flag(featured_raw) if featured_raw is not None else None,
            limit=request.args.get("limit", 20, type=int),
            offset=request.args.get("offset", 0, type=int),
        )
        return jsonify(
            {
                "posts": [PostDTO.from_domain(p).model_dump(mode="json") for p in page.items],
                "total": page.total,
                "limit": page.limit,
                "offset": page.offset,
            }
        )

    def get_post(self, post_id: str):
        return jsonify(PostDTO.from_domain(self._get.execute(post_id)).model_dump(mode="json"))

    @server_action()
    def create_post(self):
        dto = parse_dto(PostRequestDTO, action_payload())
        post = self._create.execute(dto.to_input())
        _audit(AuditAction.POST_CREATED, post.id)
        return _ok(post.id, HTTPStatus.CREATED)

    @server_action()
    def update_post(self):
        dto = parse_dto(PostRequestDTO, action_payload())
        post = self._update.execute(dto.id, dto.to_input())
        _audit(AuditAction.POST_UPDATED, post.id)
        return _ok(post.id)

    @server_action()
    def delete_post(self):
        dto = parse_dto(DeleteRequestDTO, action_payload())
        self._delete.execute(dto.id)
        _audit(AuditAction.POST_DELETED, dto.id)
        return _ok()


class ProjectsController:
    def __init__(
        self,
        *,
        list_use_case: ListProjectsUseCase,
        get_use_case: GetProjectUseCase,
        create_use_case: CreateProjectUseCase,
        update_use_case: UpdateProjectUseCase,
        delete_use_case: DeleteProjectUseCase,
    ) -> None:
        self._list = list_use_case
        self._get = get_use_case
        self._create = create_use_case
        self._update = update_use_case
        self._delete = delete_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("projects", __name__, url_prefix="/api/projects")
        bp.add_url_rule("", view_func=self.list_projects, methods=["GET"], endpoint="list")
        bp.add_url_rule(
            "/<project_id>", view_func=self.get_project, methods=["GET"], endpoint="get"
        )
        bp.add_url_rule("", view_func=self.create_project, methods=["POST"], endpoint="create")
        bp.add_url_rule(
            "/update", view_func=self.update_project, methods=["POST"], endpoint="update"
        )
        bp.add_url_rule(
            "/delete", view_func=self.delete_project, methods=["POST"], endpoint="delete"
        )
        return bp

    def list_projects(self):
        projects = self._list.execute(category_id=request.args.get("category_id") or None)
        return jsonify(
            {"projects": [ProjectDTO.from_domain(p).model_dump(mode="json") for p in projects]}
        )

    def get_project(self, project_id: str):
        project = self._get.execute(project_id)
        return jsonify(ProjectDTO.from_domain(project).model_dump(mode="json"))

    @server_action()
    def create_project(self):
        dto = parse_dto(ProjectRequestDTO, action_payload())
        project = self._create.execute(dto.to_input())
        _audit(AuditAction.PROJECT_CREATED, project.id)
        return _ok(project.id, HTTPStatus.CREATED)

    @server_action()
    def update_project(self):
        dto = parse_dto(ProjectRequestDTO, action_payload())
        project = self._update.execute(dto.id, dto.to_input())
        _audit(AuditAction.PROJECT_UPDATED, project.id)
        return _ok(project.id)

    @server_action()
    def delete_project(self):
        dto = parse_dto(DeleteRequestDTO, action_payload())
        self._delete.execute(dto.id)
        _audit(AuditAction.PROJECT_DELETED, dto.id)
        return _ok()


class CategoriesController:
    def __init__(
        self,
        *,
        list_use_case: ListCategoriesUseCase,
        create_use_case: CreateCategoryUseCase,
        update_use_case: UpdateCategoryUseCase,
        delete_use_case: DeleteCategoryUseCase,
    ) -> None:
        self._list = list_use_case
        self._create = create_use_case
        self._update = update_use_case
        self._delete = delete_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("categories", __name__, url_prefix="/api/categories")
        bp.add_url_rule("", view_func=self.list_categories, methods=["GET"], endpoint="list")
        bp.add_url_rule("", view_func=self.create_category, methods=["POST"], endpoint="create")
        bp.add_url_rule(
            "/update", view_func=self.update_category, methods=["POST"], endpoint="update"
        )
        bp.add_url_rule(
            "/delete", view_func=self.delete_category, methods=["POST"], endpoint="delete"
        )
        return bp

    def list_categories(self):
        categories = self._list.execute()
        return jsonify(
            {"categories": [CategoryDTO.from_domain(c).model_dump() for c in categories]}
        )

    @server_action()
    def create_category(self):
        dto = parse_dto(CategoryRequestDTO, action_payload())
        category = self._create.execute(dto.name, icon=dto.icon, order=dto.order)
        _audit(AuditAction.CATEGORY_CREATED, category.id)
        return _ok(category.id, HTTPStatus.CREATED)

    @server_action()
    def update_category(self):
        dto = parse_dto(CategoryRequestDTO, action_payload())
        category = self._update.execute(dto.id, dto.name, icon=dto.icon, order=dto.order)
        _audit(AuditAction.CATEGORY_UPDATED, category.id)
        return _ok(category.id)

    @server_action()
    def delete_category(self):
        dto = parse_dto(DeleteRequestDTO, action_payload())
        self._delete.execute(dto.id)
        _audit(AuditAction.CATEGORY_DELETED, dto.id)
        return _ok()
