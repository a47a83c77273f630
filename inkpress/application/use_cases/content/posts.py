# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from inkpress.domain.content.entities import Post, default_intro, split_tags
from inkpress.domain.content.exceptions import PostNotFoundError
from inkpress.domain.content.repositories import PostRepository
from inkpress.shared.errors import ValidationError
from inkpress.shared.logging import logger

POST_TAG_SEPARATORS = r"[,\n]"
MAX_PAGE_SIZE = 100


@dataclass(slots=True)
class PostInput:
    title: str
    content: str
    intro: str = ""
    tags: str | Sequence[str] | None = None
    featured: bool = False

    def normalized(self) -> PostInput:
        title = (self.title or "").strip()
        if not title:
            raise ValidationError("title_required")
        if not self.content:
            raise ValidationError("content_required")
        return PostInput(
            title=title,
            content=self.content,
            intro=default_intro((self.intro or "").strip(), self.content),
            tags=split_tags(self.tags, POST_TAG_SEPARATORS),
            featured=bool(self.featured),
        )


@dataclass(slots=True, frozen=True)
class PostPage:
    items: Sequence[Post]
    total: int
    limit: int
    offset: int = 0


class ListPostsUseCase:
    def __init__(self, posts: PostRepository) -> None:
        self._posts = posts

    def execute(
        self,
        *,
        tag: str | None = None,
        featured: bool | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> PostPage:
        limit = min(max(int(limit), 1), MAX_PAGE_SIZE)
        offset = max(int(offset), 0)
        items, total = self._posts.list(tag=tag, featured=featured, limit=limit, offset=offset)
        return PostPage(items=items, total=total, limit=limit, offset=offset)


class GetPostUseCase:
    def __init__(self, posts: PostRepository) -> None:
        self._posts = posts

    def execute(self, post_id: str) -> Post:
        post = self._posts.get(post_id)
        if post is None:
            raise PostNotFoundError(context={"post_id": post_id})
        return post


class CreatePostUseCase:
    def __init__(self, posts: PostRepository) -> None:
        self._posts = posts

    def execute(self, data: PostInput) -> Post:
        data = data.normalized()
        post = self._posts.add(
            Post(
                id="",
                title=data.title,
                intro=data.intro,
                content=data.content,
                tags=tuple(data.tags or ()),
                featured=data.featured,
            )
        )
        logger.info(f"posts: created post_id={post.id}")
        return post


class UpdatePostUseCase:
    def __init__(self, posts: PostRepository) -> None:
        self._posts = posts

    def execute(self, post_id: str, data: PostInput) -> Post:
        if not post_id:
            raise ValidationError("post_id_required")
        data = data.normalized()
        current = self._posts.get(post_id)
        if current is None:
            raise PostNotFoundError(context={"post_id": post_id})
        post = self._posts.update(
            replace(
                current,
                title=data.title,
                intro=data.intro,
                content=data.content,
                tags=tuple(data.tags or ()),
                featured=data.featured,
            )
        )
        logger.info(f"posts: updated post_id={post_id}")
        return post


class DeletePostUseCase:
    def __init__(self, posts: PostRepository) -> None:
        self._posts = posts

    def execute(self, post_id: str) -> None:
        if not post_id:
            raise ValidationError("post_id_required")
        if self._posts.get(post_id) is None:
            raise PostNotFoundError(context={"post_id": post_id})
        self._posts.delete(post_id)
        logger.info(f"posts: deleted post_id={post_id}")
