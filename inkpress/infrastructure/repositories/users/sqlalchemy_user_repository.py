# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from inkpress.domain.users.entities import Role
from inkpress.domain.users.entities import User as DomainUser
from inkpress.domain.users.exceptions import UserNotFoundError
from inkpress.domain.users.repositories import UserRepository
from inkpress.infrastructure.db.models import User, new_id
from inkpress.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        role=Role(row.role),
        is_active=bool(row.is_active),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.username == username).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email).first()
            return _to_domain(row) if row else None

    def list_all(self) -> Sequence[DomainUser]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.query(User).order_by(User.created_at.asc()).all()
            return [_to_domain(row) for row in rows]

    def count(self) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            return int(session.query(func.count(User.id)).scalar() or 0)

    def count_active_admins(self) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            total = (
                session.query(func.count(User.id))
                .filter(User.role == Role.ADMIN.value, User.is_active.is_(True))
                .scalar()
            )
            return int(total or 0)

    def add(self, user: DomainUser) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = User(
                id=user.id or new_id(),
                username=user.username,
                email=user.email,
                password_hash=user.password_hash,
                role=Role(user.role).value,
                is_active=user.is_active,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def update(self, user: DomainUser) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user.id)
            if row is None:
                raise UserNotFoundError(context={"user_id": user.id})
            row.username = user.username
            row.email = user.email
            row.password_hash = user.password_hash
            row.role = Role(user.role).value
            row.is_active = user.is_active
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def delete(self, user_id: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(User).filter(User.id == user_id).delete()
