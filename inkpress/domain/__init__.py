# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .content import Category, Post, Project
from .users import Role, SessionClaims, User

__all__ = [
    "Category",
    "Post",
    "Project",
    "Role",
    "SessionClaims",
    "User",
]
