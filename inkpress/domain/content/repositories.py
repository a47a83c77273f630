# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import Category, Post, Project


class PostRepository(Protocol):
    def get(self, post_id: str) -> Post | None: ...
    def list(
        self,
        *,
        tag: str | None = None,
        featured: bool | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[Sequence[Post], int]: ...
    def add(self, post: Post) -> Post: ...
    def update(self, post: Post) -> Post: ...
    def delete(self, post_id: str) -> None: ...


class ProjectRepository(Protocol):
    def get(self, project_id: str) -> Project | None: ...
    def list(self, *, category_id: str | None = None) -> Sequence[Project]: ...
    def count_in_category(self, category_id: str) -> int: ...
    def add(self, project: Project) -> Project: ...
    def update(self, project: Project) -> Project: ...
    def delete(self, project_id: str) -> None: ...


class CategoryRepository(Protocol):
    def get(self, category_id: str) -> Category | None: ...
    def list(self) -> Sequence[Category]: ...
    def add(self, category: Category) -> Category: ...
    def update(self, category: Category) -> Category: ...
    def delete(self, category_id: str) -> None: ...
