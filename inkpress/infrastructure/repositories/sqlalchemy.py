# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from inkpress.domain.content.entities import Category as DomainCategory
from inkpress.domain.content.entities import Post as DomainPost
from inkpress.domain.content.entities import Project as DomainProject
from inkpress.domain.content.exceptions import (
    CategoryNotFoundError,
    PostNotFoundError,
    ProjectNotFoundError,
)
from inkpress.domain.content.repositories import (
    CategoryRepository,
    PostRepository,
    ProjectRepository,
)
from inkpress.infrastructure.db.models import Category, Post, Project, new_id
from inkpress.infrastructure.unit_of_work import unit_of_work_scope


def _post(row: Post) -> DomainPost:
    return DomainPost(
        id=row.id,
        title=row.title,
        intro=row.intro or "",
        content=row.content,
        tags=tuple(row.tags or ()),
        featured=bool(row.featured),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _project(row: Project) -> DomainProject:
    return DomainProject(
        id=row.id,
        name=row.name,
        category_id=row.category_id,
        description=row.description,
        url=row.url,
        link_name=row.link_name,
        tags=tuple(row.tags or ()),
        featured=bool(row.featured),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _category(row: Category) -> DomainCategory:
    return DomainCategory(id=row.id, name=row.name, icon=row.icon, order=int(row.order or 0))


class SqlAlchemyPostRepository(PostRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, post_id: str) -> DomainPost | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Post, post_id)
            return _post(row) if row else None

    def list(
        self,
        *,
        tag: str | None = None,
        featured: bool | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[Sequence[DomainPost], int]:
        with unit_of_work_scope(self._session_factory) as session:
            query = session.query(Post)
            if featured is not None:
                query = query.filter(Post.featured.is_(featured))
            query = query.order_by(desc(Post.created_at))

            if tag is None:
                total = query.count()
                rows = query.offset(offset).limit(limit).all()
                return [_post(row) for row in rows], total

            # JSON containment differs per backend; filter tags in Python.
            matching = [row for row in query.all() if tag in (row.tags or ())]
            page = matching[offset : offset + limit]
            return [_post(row) for row in page], len(matching)

    def add(self, post: DomainPost) -> DomainPost:
        with unit_of_work_scope(self._session_factory) as session:
            row = Post(
                id=post.id or new_id(),
                title=post.title,
                intro=post.intro,
                content=post.content,
                tags=list(post.tags),
                featured=post.featured,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _post(row)

    def update(self, post: DomainPost) -> DomainPost:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Post, post.id)
            if row is None:
                raise PostNotFoundError(context={"post_id": post.id})
            row.title = post.title
            row.intro = post.intro
            row.content = post.content
            row.tags = list(post.tags)
            row.featured = post.featured
            session.flush()
            session.refresh(row)
            return _post(row)

    def delete(self, post_id: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(Post).filter(Post.id == post_id).delete()


class SqlAlchemyProjectRepository(ProjectRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, project_id: str) -> DomainProject | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Project, project_id)
            return _project(row) if row else None

    def list(self, *, category_id: str | None = None) -> Sequence[DomainProject]:
        with unit_of_work_scope(self._session_factory) as session:
            query = session.query(Project)
            if category_id:
                query = query.filter(Project.category_id == category_id)
            rows = query.order_by(desc(Project.featured), desc(Project.created_at)).all()
            return [_project(row) for row in rows]

    def count_in_category(self, category_id: str) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            total = (
                session.query(func.count(Project.id))
                .filter(Project.category_id == category_id)
                .scalar()
            )
            return int(total or 0)

    def add(self, project: DomainProject) -> DomainProject:
        with unit_of_work_scope(self._session_factory) as session:
            row = Project(
                id=project.id or new_id(),
                name=project.name,
                category_id=project.category_id,
                description=project.description,
                url=project.url,
                link_name=project.link_name,
                tags=list(project.tags),
                featured=project.featured,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _project(row)

    def update(self, project: DomainProject) -> DomainProject:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Project, project.id)
            if row is None:
                raise ProjectNotFoundError(context={"project_id": project.id})
            row.name = project.name
            row.category_id = project.category_id
            row.description = project.description
            row.url = project.url
            row.link_name = project.link_name
            row.tags = list(project.tags)
            row.featured = project.featured
            session.flush()
            session.refresh(row)
            return _project(row)

    def delete(self, project_id: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(Project).filter(Project.id == project_id).delete()


class SqlAlchemyCategoryRepository(CategoryRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, category_id: str) -> DomainCategory | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Category, category_id)
            return _category(row) if row else None

    def list(self) -> Sequence[DomainCategory]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.query(Category).order_by(Category.order.asc(), Category.name.asc()).all()
            return [_category(row) for row in rows]

    def add(self, category: DomainCategory) -> DomainCategory:
        with unit_of_work_scope(self._session_factory) as session:
            row = Category(
                id=category.id or new_id(),
                name=category.name,
                icon=category.icon,
                order=category.order,
            )
            session.add(row)
            session.flush()
            return _category(row)

    def update(self, category: DomainCategory) -> DomainCategory:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Category, category.id)
            if row is None:
                raise CategoryNotFoundError(context={"category_id": category.id})
            row.name = category.name
            row.icon = category.icon
            row.order = category.order
            session.flush()
            return _category(row)

    def delete(self, category_id: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(Category).filter(Category.id == category_id).delete()
