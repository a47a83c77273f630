from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask

from fakes import SECRET

from inkpress.app import create_app
from inkpress.application.use_cases.users.manage_users import CreateUserUseCase
from inkpress.domain.users.entities import Role, User
from inkpress.infrastructure.action_guard import CONTAINER_EXTENSION
from inkpress.shared.config import AppConfig, AuthConfig, DatabaseConfig

ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture()
def app_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "app.log"))
    return AppConfig(
        auth=AuthConfig(secret=SECRET),
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'inkpress.db'}"),
    )


@pytest.fixture()
def app(app_config: AppConfig) -> Iterator[Flask]:
    app = create_app(app_config)
    yield app
    app.extensions[CONTAINER_EXTENSION].database.dispose()


@pytest.fixture()
def container(app: Flask):
    return app.extensions[CONTAINER_EXTENSION]


@pytest.fixture()
def admin(container) -> User:
    return CreateUserUseCase(
        users=container.user_repository, password_hasher=container.password_hasher
    ).execute("admin", ADMIN_PASSWORD, role=Role.ADMIN.value)


def login(client, username: str = "admin", password: str = ADMIN_PASSWORD, **extra):
    return client.post("/login", data={"username": username, "password": password, **extra})


def csrf_of(client) -> str:
    cookie = client.get_cookie("csrf")
    assert cookie is not None
    return cookie.value
