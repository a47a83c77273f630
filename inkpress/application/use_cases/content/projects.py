# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from inkpress.domain.content.entities import Project, split_tags
from inkpress.domain.content.exceptions import CategoryNotFoundError, ProjectNotFoundError
from inkpress.domain.content.repositories import CategoryRepository, ProjectRepository
from inkpress.shared.errors import ValidationError
from inkpress.shared.logging import logger

PROJECT_TAG_SEPARATORS = r","


@dataclass(slots=True)
class ProjectInput:
    name: str
    category_id: str
    description: str | None = None
    url: str | None = None
    link_name: str | None = None
    tags: str | Sequence[str] | None = None
    featured: bool = False

    def normalized(self) -> ProjectInput:
        name = (self.name or "").strip()
        category_id = (self.category_id or "").strip()
        if not name or not category_id:
            raise ValidationError("name_and_category_required")
        return ProjectInput(
            name=name,
            category_id=category_id,
            description=self.description or None,
            url=self.url or None,
            link_name=self.link_name or None,
            tags=split_tags(self.tags, PROJECT_TAG_SEPARATORS),
            featured=bool(self.featured),
        )


class ListProjectsUseCase:
    def __init__(self, projects: ProjectRepository) -> None:
        self._projects = projects

    def execute(self, *, category_id: str | None = None) -> Sequence[Project]:
        return self._projects.list(category_id=category_id)


class GetProjectUseCase:
    def __init__(self, projects: ProjectRepository) -> None:
        self._projects = projects

    def execute(self, project_id: str) -> Project:
        project = self._projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(context={"project_id": project_id})
        return project


class _ProjectWriter:
    def __init__(self, *, projects: ProjectRepository, categories: CategoryRepository) -> None:
        self._projects = projects
        self._categories = categories

    def _require_category(self, category_id: str) -> None:
        if self._categories.get(category_id) is None:
            raise CategoryNotFoundError(context={"category_id": category_id})


class CreateProjectUseCase(_ProjectWriter):
    def execute(self, data: ProjectInput) -> Project:
        data = data.normalized()
        self._require_category(data.category_id)
        project = self._projects.add(
            Project(
                id="",
                name=data.name,
                category_id=data.category_id,
                description=data.description,
                url=data.url,
                link_name=data.link_name,
                tags=tuple(data.tags or ()),
                featured=data.featured,
            )
        )
        logger.info(f"projects: created project_id={project.id}")
        return project


class UpdateProjectUseCase(_ProjectWriter):
    def execute(self, project_id: str, data: ProjectInput) -> Project:
        if not project_id:
            raise ValidationError("project_id_required")
        data = data.normalized()
        current = self._projects.get(project_id)
        if current is None:
            raise ProjectNotFoundError(context={"project_id": project_id})
        self._require_category(data.category_id)
        project = self._projects.update(
            replace(
                current,
                name=data.name,
                category_id=data.category_id,
                description=data.description,
                url=data.url,
                link_name=data.link_name,
                tags=tuple(data.tags or ()),
                featured=data.featured,
            )
        )
        logger.info(f"projects: updated project_id={project_id}")
        return project


class DeleteProjectUseCase:
    def __init__(self, projects: ProjectRepository) -> None:
        self._projects = projects

    def execute(self, project_id: str) -> None:
        if not project_id:
            raise ValidationError("project_id_required")
        if self._projects.get(project_id) is None:
            raise ProjectNotFoundError(context={"project_id": project_id})
        self._projects.delete(project_id)
        logger.info(f"projects: deleted project_id={project_id}")
