# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .categories import (
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    ListCategoriesUseCase,
    UpdateCategoryUseCase,
)
from .posts import (
    CreatePostUseCase,
    DeletePostUseCase,
    GetPostUseCase,
    ListPostsUseCase,
    PostInput,
    UpdatePostUseCase,
)
from .projects import (
    CreateProjectUseCase,
    DeleteProjectUseCase,
    GetProjectUseCase,
    ListProjectsUseCase,
    ProjectInput,
    UpdateProjectUseCase,
)

__all__ = [
    "CreateCategoryUseCase",
    "CreatePostUseCase",
    "CreateProjectUseCase",
    "DeleteCategoryUseCase",
    "DeletePostUseCase",
    "DeleteProjectUseCase",
    "GetPostUseCase",
    "GetProjectUseCase",
    "ListCategoriesUseCase",
    "ListPostsUseCase",
    "ListProjectsUseCase",
    "PostInput",
    "ProjectInput",
    "UpdateCategoryUseCase",
    "UpdatePostUseCase",
    "UpdateProjectUseCase",
]
