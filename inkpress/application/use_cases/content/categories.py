# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from inkpress.domain.content.entities import Category
from inkpress.domain.content.exceptions import CategoryInUseError, CategoryNotFoundError
from inkpress.domain.content.repositories import CategoryRepository, ProjectRepository
from inkpress.shared.errors import ValidationError
from inkpress.shared.logging import logger


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name_required")
    return name


class ListCategoriesUseCase:
    def __init__(self, categories: CategoryRepository) -> None:
        self._categories = categories

    def execute(self) -> Sequence[Category]:
        return self._categories.list()


class CreateCategoryUseCase:
    def __init__(self, categories: CategoryRepository) -> None:
        self._categories = categories

    def execute(self, name: str, *, icon: str | None = None, order: int = 0) -> Category:
        category = self._categories.add(
            Category(id="", name=_clean_name(name), icon=(icon or "").strip() or None, order=order)
        )
        logger.info(f"categories: created category_id={category.id}")
        return category


class UpdateCategoryUseCase:
    def __init__(self, categories: CategoryRepository) -> None:
        self._categories = categories

    def execute(
        self, category_id: str, name: str, *, icon: str | None = None, order: int = 0
    ) -> Category:
        if not category_id:
            raise ValidationError("category_id_required")
        if self._categories.get(category_id) is None:
            raise CategoryNotFoundError(context={"category_id": category_id})
        category = self._categories.update(
            Category(
                id=category_id,
                name=_clean_name(name),
                icon=(icon or "").strip() or None,
                order=order,
            )
        )
        logger.info(f"categories: updated category_id={category_id}")
        return category


class DeleteCategoryUseCase:
    def __init__(self, *, categories: CategoryRepository, projects: ProjectRepository) -> None:
        self._categories = categories
        self._projects = projects

    def execute(self, category_id: str) -> None:
        if not category_id:
            raise ValidationError("category_id_required")
        if self._categories.get(category_id) is None:
            raise CategoryNotFoundError(context={"category_id": category_id})
        in_use = self._projects.count_in_category(category_id)
        if in_use:
            raise CategoryInUseError(context={"projects": in_use})
        self._categories.delete(category_id)
        logger.info(f"categories: deleted category_id={category_id}")
