# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Category, Post, Project, default_intro, split_tags
from .exceptions import (
    CategoryInUseError,
    CategoryNotFoundError,
    PostNotFoundError,
    ProjectNotFoundError,
)

__all__ = [
    "Category",
    "Post",
    "Project",
    "default_intro",
    "split_tags",
    "CategoryInUseError",
    "CategoryNotFoundError",
    "PostNotFoundError",
    "ProjectNotFoundError",
]
