# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkpress.application.use_cases.content import PostInput, ProjectInput
from inkpress.domain.content.entities import Category, Post, Project

from .common import form_flag


class PostRequestDTO(BaseModel):
    id: str = ""
    title: str = ""
    intro: str = ""
    content: str = ""
    tags: str | list[str] = ""
    featured: bool = False

    @field_validator("featured", mode="before")
    @classmethod
    def _coerce_featured(cls, value: Any) -> bool:
        return form_flag(value)

    def to_input(self) -> PostInput:
        return PostInput(
            title=self.title,
            content=self.content,
            intro=self.intro,
            tags=self.tags,
            featured=self.featured,
        )


class ProjectRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    description: str | None = None
    url: str | None = None
    link_name: str | None = Field(default=None, alias="linkName")
    category_id: str = Field(default="", alias="categoryId")
    tags: str | list[str] = ""
    featured: bool = False

    @field_validator("featured", mode="before")
    @classmethod
    def _coerce_featured(cls, value: Any) -> bool:
        return form_flag(value)

    def to_input(self) -> ProjectInput:
        return ProjectInput(
            name=self.name,
            category_id=self.category_id,
            description=self.description,
            url=self.url,
            link_name=self.link_name,
            tags=self.tags,
            featured=self.featured,
        )


class CategoryRequestDTO(BaseModel):
    id: str = ""
    name: str = ""
    icon: str | None = None
    order: int = 0

    @field_validator("order", mode="before")
    @classmethod
    def _lenient_order(cls, value: Any) -> int:
        try:
            return int(str(value).strip() or 0)
        except ValueError:
            return 0


class DeleteRequestDTO(BaseModel):
    id: str = ""


class PostDTO(BaseModel):
    id: str
    title: str
    intro: str
    content: str
    tags: list[str]
    featured: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, post: Post) -> PostDTO:
        return cls(
            id=post.id,
            title=post.title,
            intro=post.intro,
            content=post.content,
            tags=list(post.tags),
            featured=post.featured,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class ProjectDTO(BaseModel):
    id: str
    name: str
    category_id: str
    description: str | None = None
    url: str | None = None
    link_name: str | None = None
    tags: list[str]
    featured: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, project: Project) -> ProjectDTO:
        return cls(
            id=project.id,
            name=project.name,
            category_id=project.category_id,
            description=project.description,
            url=project.url,
            link_name=project.link_name,
            tags=list(project.tags),
            featured=project.featured,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


class CategoryDTO(BaseModel):
    id: str
    name: str
    icon: str | None = None
    order: int = 0

    @classmethod
    def from_domain(cls, category: Category) -> CategoryDTO:
        return cls(id=category.id, name=category.name, icon=category.icon, order=category.order)
