# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from inkpress.shared.config import DatabaseConfig
from inkpress.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _build_engine(config: DatabaseConfig) -> Engine:
    kwargs: dict[str, object] = {"echo": False, "pool_pre_ping": True}
    if config.url.startswith("sqlite"):
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
    return create_engine(config.url, **kwargs)


class Database:
    """Engine and session factory shared by every request handler.

    Built once by the application factory and torn down with ``dispose``.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.engine: Engine = _build_engine(config)
        self.session_factory = scoped_session(
            sessionmaker(
                bind=self.engine,
                autoflush=False,
                autocommit=False,
                expire_on_commit=False,
            )
        )

    def __call__(self) -> Session:
        return self.session_factory()

    def init_schema(self) -> None:
        from inkpress.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def remove_session(self) -> None:
        self.session_factory.remove()

    def dispose(self) -> None:
        self.session_factory.remove()
        self.engine.dispose()
        logger.info("Database engine disposed")
