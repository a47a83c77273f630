# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Category:

    id: str
    name: str
    icon: str | None = None
    order: int = 0


@dataclass(slots=True, frozen=True)
class Project:

    id: str
    name: str
    category_id: str
    description: str | None = None
    url: str | None = None
    link_name: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    featured: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class Post:

    id: str
    title: str
    intro: str
    content: str
    tags: tuple[str, ...] = field(default_factory=tuple)
    featured: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


INTRO_FALLBACK_LENGTH = 200


def default_intro(intro: str, content: str) -> str:
    return intro or content[:INTRO_FALLBACK_LENGTH]


def split_tags(raw: str | Iterable[str] | None, pattern: str = r"[,\n]") -> tuple[str, ...]:
    """Split, trim and de-duplicate tags, keeping first-seen order."""
    if raw is None:
        return ()
    parts = re.split(pattern, raw) if isinstance(raw, str) else list(raw)
    seen: dict[str, None] = {}
    for part in parts:
        tag = str(part).strip()
        if tag:
            seen.setdefault(tag, None)
    return tuple(seen)
