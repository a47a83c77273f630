from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from itertools import count

from inkpress.domain.content.entities import Category, Post, Project
from inkpress.domain.content.repositories import (
    CategoryRepository,
    PostRepository,
    ProjectRepository,
)
from inkpress.domain.users.entities import Role, User
from inkpress.domain.users.repositories import PasswordHasher, UserRepository

SECRET = "a-very-long-signing-secret-for-unit-tests-0123456789abcdef"


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class MonotonicClock:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


def make_user(
    user_id: str,
    username: str,
    *,
    role: Role = Role.USER,
    is_active: bool = True,
    email: str | None = None,
    password: str = "secret123",
) -> User:
    now = datetime.now(UTC)
    return User(
        id=user_id,
        username=username,
        email=email,
        password_hash=f"hashed:{password}",
        role=role,
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )


class InMemoryUserRepository(UserRepository):
    def __init__(self, *users: User) -> None:
        self._users: dict[str, User] = {u.id: u for u in users}
        self._seq = count(1)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def list_all(self) -> Sequence[User]:
        return list(self._users.values())

    def count(self) -> int:
        return len(self._users)

    def count_active_admins(self) -> int:
        return sum(1 for u in self._users.values() if u.is_active_admin)

    def add(self, user: User) -> User:
        stored = replace(user, id=user.id or f"u{next(self._seq)}")
        self._users[stored.id] = stored
        return stored

    def update(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def delete(self, user_id: str) -> None:
        self._users.pop(user_id, None)


class InMemoryPostRepository(PostRepository):
    def __init__(self) -> None:
        self.items: dict[str, Post] = {}
        self._seq = count(1)

    def get(self, post_id: str) -> Post | None:
        return self.items.get(post_id)

    def list(self, *, tag=None, featured=None, limit=20, offset=0):
        rows = [
            p
            for p in self.items.values()
            if (tag is None or tag in p.tags) and (featured is None or p.featured is featured)
        ]
        return rows[offset : offset + limit], len(rows)

    def add(self, post: Post) -> Post:
        stored = replace(post, id=f"p{next(self._seq)}")
        self.items[stored.id] = stored
        return stored

    def update(self, post: Post) -> Post:
        self.items[post.id] = post
        return post

    def delete(self, post_id: str) -> None:
        self.items.pop(post_id, None)


class InMemoryProjectRepository(ProjectRepository):
    def __init__(self) -> None:
        self.items: dict[str, Project] = {}
        self._seq = count(1)

    def get(self, project_id: str) -> Project | None:
        return self.items.get(project_id)

    def list(self, *, category_id: str | None = None) -> Sequence[Project]:
        return [p for p in self.items.values() if category_id in (None, p.category_id)]

    def count_in_category(self, category_id: str) -> int:
        return len(self.list(category_id=category_id))

    def add(self, project: Project) -> Project:
        stored = replace(project, id=f"pr{next(self._seq)}")
        self.items[stored.id] = stored
        return stored

    def update(self, project: Project) -> Project:
        self.items[project.id] = project
        return project

    def delete(self, project_id: str) -> None:
        self.items.pop(project_id, None)


class InMemoryCategoryRepository(CategoryRepository):
    def __init__(self) -> None:
        self.items: dict[str, Category] = {}
        self._seq = count(1)

    def get(self, category_id: str) -> Category | None:
        return self.items.get(category_id)

    def list(self) -> Sequence[Category]:
        return sorted(self.items.values(), key=lambda c: (c.order, c.name))

    def add(self, category: Category) -> Category:
        stored = replace(category, id=f"c{next(self._seq)}")
        self.items[stored.id] = stored
        return stored

    def update(self, category: Category) -> Category:
        self.items[category.id] = category
        return category

    def delete(self, category_id: str) -> None:
        self.items.pop(category_id, None)
