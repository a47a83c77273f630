from __future__ import annotations

from pathlib import Path

import pytest

from conftest import ADMIN_PASSWORD, csrf_of, login

from inkpress.app import create_app
from inkpress.infrastructure.auth.session_codec import SecretMisconfiguredError
from inkpress.shared.config import AppConfig, AuthConfig, DatabaseConfig


def test_create_app_refuses_missing_secret(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "app.log"))
    monkeypatch.delenv("AUTH_SECRET", raising=False)
    config = AppConfig(
        auth=AuthConfig(secret=None),
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'db.sqlite'}"),
    )

    with pytest.raises(SecretMisconfiguredError):
        create_app(config)


def test_create_app_refuses_weak_secret_in_production(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "app.log"))
    config = AppConfig(
        app_env="production",
        auth=AuthConfig(secret="changeme"),
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'db.sqlite'}"),
    )

    with pytest.raises(SecretMisconfiguredError):
        create_app(config)


def test_protected_page_redirects_anonymous_visitor(app) -> None:
    with app.test_client() as client:
        response = client.get("/dashboard")

    assert response.status_code == 302
    assert response.headers["Location"] == "/login?from=%2Fdashboard"


def test_login_sets_cookies_and_redirects_to_origin(app, admin) -> None:
    with app.test_client() as client:
        response = login(client, **{"from": "/writing"})

        assert response.status_code == 303
        assert response.headers["Location"] == "/writing"
        cookies = response.headers.getlist("Set-Cookie")
        session_header = next(c for c in cookies if c.startswith("session="))
        assert "HttpOnly" in session_header
        assert "Max-Age=28800" in session_header
        assert client.get_cookie("csrf") is not None


def test_login_ignores_foreign_redirect(app, admin) -> None:
    with app.test_client() as client:
        response = login(client, **{"from": "//evil.example"})

    assert response.headers["Location"] == "/dashboard"


@pytest.mark.parametrize("target", ["/\t/evil.example.com", "/\n/evil.example.com"])
def test_login_ignores_redirect_hidden_behind_control_characters(app, admin, target: str) -> None:
    with app.test_client() as client:
        response = login(client, **{"from": target})

    assert response.status_code == 303
    assert response.headers["Location"] == "/dashboard"


def test_login_failures_look_identical(app, admin) -> None:
    with app.test_client() as client:
        unknown = login(client, username="nobody", password="whatever")
        wrong = login(client, password="not-the-password")

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json() == {"ok": False, "message": "invalid_credentials"}


def test_login_is_rate_limited(app, admin) -> None:
    with app.test_client() as client:
        for _ in range(5):
            assert login(client, password="wrong").status_code == 401
        blocked = login(client)

    assert blocked.status_code == 429
    assert blocked.get_json()["message"] == "rate_limited"


def test_malformed_login_bodies_count_toward_the_limit(app, admin) -> None:
    with app.test_client() as client:
        for _ in range(5):
            response = client.post(
                "/login", json={"username": 5, "password": ["x"], "from": {"path": "/"}}
            )
            assert response.status_code == 400
            assert response.get_json()["message"] == "credentials_required"
        blocked = login(client)

    assert blocked.status_code == 429


def test_logged_in_user_visiting_login_goes_to_dashboard(app, admin) -> None:
    with app.test_client() as client:
        login(client)
        response = client.get("/login")

    assert response.status_code == 302
    assert response.headers["Location"] == "/dashboard"


def test_dashboard_reports_identity_and_counts(app, admin) -> None:
    with app.test_client() as client:
        client.set_cookie("locale", "en")
        login(client)
        response = client.get("/dashboard")

    body = response.get_json()
    assert response.status_code == 200
    assert body["user"] == {"id": admin.id, "username": "admin", "role": "admin"}
    assert body["locale"] == "en"
    assert body["counts"] == {"posts": 0, "projects": 0, "categories": 0}


def test_content_lifecycle(app, admin) -> None:
    with app.test_client() as client:
        login(client)
        csrf = csrf_of(client)

        category = client.post("/api/categories", json={"name": "Tools", "order": "2", "csrf": csrf})
        assert category.status_code == 201
        category_id = category.get_json()["id"]

        project = client.post(
            "/api/projects",
            json={
                "name": "inkpress",
                "categoryId": category_id,
                "url": "https://example.com",
                "tags": "python, flask",
                "csrf": csrf,
            },
        )
        assert project.status_code == 201
        project_id = project.get_json()["id"]

        post = client.post(
            "/api/posts",
            data={"title": "Hello", "content": "First post body", "tags": "python\nnotes", "csrf": csrf},
        )
        assert post.status_code == 201
        post_id = post.get_json()["id"]

        in_use = client.post("/api/categories/delete", json={"id": category_id, "csrf": csrf})
        assert in_use.status_code == 409
        assert in_use.get_json()["message"] == "category_in_use"

        listed = client.get("/api/posts?tag=python").get_json()
        assert listed["total"] == 1
        assert listed["posts"][0]["tags"] == ["python", "notes"]
        assert listed["posts"][0]["intro"] == "First post body"

        fetched = client.get(f"/api/projects/{project_id}").get_json()
        assert fetched["tags"] == ["python", "flask"]
        assert fetched["category_id"] == category_id

        assert client.post("/api/projects/delete", json={"id": project_id, "csrf": csrf}).status_code == 200
        assert client.post("/api/categories/delete", json={"id": category_id, "csrf": csrf}).status_code == 200
        assert client.post("/api/posts/delete", json={"id": post_id, "csrf": csrf}).status_code == 200

        assert client.get(f"/api/posts/{post_id}").status_code == 404


def test_mutation_without_csrf_is_rejected(app, admin) -> None:
    with app.test_client() as client:
        login(client)
        response = client.post("/api/categories", json={"name": "Tools"})

    assert response.status_code == 403
    assert response.get_json() == {"ok": False, "message": "csrf_failed"}


def test_user_management_protects_last_admin(app, admin) -> None:
    with app.test_client() as client:
        login(client)
        csrf = csrf_of(client)

        deleted_self = client.post("/api/users/delete", json={"userId": admin.id, "csrf": csrf})
        assert deleted_self.status_code == 409
        assert deleted_self.get_json()["message"] == "last_admin"

        created = client.post(
            "/api/users",
            json={"username": "bob", "password": "bob-pass-1", "role": "user", "csrf": csrf},
        )
        assert created.status_code == 201
        bob_id = created.get_json()["id"]

        demote = client.post(
            "/api/users/update",
            json={"userId": admin.id, "role": "user", "isActive": True, "csrf": csrf},
        )
        assert demote.status_code == 409

        users = client.get("/api/users").get_json()["users"]
        assert {u["username"] for u in users} == {"admin", "bob"}

        assert client.post("/api/users/delete", json={"userId": bob_id, "csrf": csrf}).status_code == 200


def test_non_admin_cannot_manage_users(app, admin) -> None:
    with app.test_client() as client:
        login(client)
        client.post(
            "/api/users",
            json={"username": "carol", "password": "carol-pass", "csrf": csrf_of(client)},
        )
        client.post("/logout")
        login(client, username="carol", password="carol-pass")
        response = client.post("/api/users", json={"username": "x", "password": "y" * 8, "csrf": csrf_of(client)})

    assert response.status_code == 403
    assert response.get_json()["message"] == "forbidden"


def test_health_and_security_headers(app) -> None:
    with app.test_client() as client:
        response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "database": "ok"}
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_admin_password_is_hashed(container, admin) -> None:
    stored = container.user_repository.find_by_username("admin")

    assert stored.password_hash != ADMIN_PASSWORD
    assert container.password_hasher.verify(ADMIN_PASSWORD, stored.password_hash)

