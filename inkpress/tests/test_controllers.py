from __future__ import annotations

import pytest

from conftest import csrf_of, login


def test_theme_defaults_to_system(app) -> None:
    with app.test_client() as client:
        response = client.get("/api/theme")

    assert response.get_json() == {"theme": "system"}


@pytest.mark.parametrize("theme", ["light", "dark", "system"])
def test_theme_is_persisted_in_cookie(app, theme: str) -> None:
    with app.test_client() as client:
        response = client.post("/api/theme", json={"theme": theme})
        current = client.get("/api/theme").get_json()

    assert response.status_code == 200
    assert any(c.startswith(f"theme={theme}") for c in response.headers.getlist("Set-Cookie"))
    assert current == {"theme": theme}


@pytest.mark.parametrize("body", [{"theme": "neon"}, {}, ["dark"]])
def test_theme_rejects_unknown_values(app, body) -> None:
    with app.test_client() as client:
        response = client.post("/api/theme", json=body)
        current = client.get("/api/theme").get_json()

    assert response.status_code == 400
    assert response.get_json() == {"ok": False, "message": "invalid_theme"}
    assert current == {"theme": "system"}


def test_locale_cookie_issued_on_first_visit(app) -> None:
    with app.test_client() as client:
        response = client.get("/login", headers={"Accept-Language": "en-US,en;q=0.9"})

    assert response.get_json()["locale"] == "en"
    assert any(c.startswith("locale=en") for c in response.headers.getlist("Set-Cookie"))


def test_transient_query_params_are_stripped(app) -> None:
    with app.test_client() as client:
        response = client.get("/login?_lang=en&from=%2Fwriting")

    assert response.status_code == 302
    assert response.headers["Location"] == "/login?from=%2Fwriting"


def test_login_page_exposes_safe_next_target(app) -> None:
    with app.test_client() as client:
        safe = client.get("/login?from=/projects").get_json()
        unsafe = client.get("/login?from=https://evil.example").get_json()

    assert safe["next"] == "/projects"
    assert unsafe["next"] == "/dashboard"


def test_logout_clears_auth_cookies(app, admin) -> None:
    with app.test_client() as client:
        login(client)
        response = client.post("/logout")

        assert response.status_code == 303
        assert response.headers["Location"] == "/login"
        cleared = [c for c in response.headers.getlist("Set-Cookie") if "Max-Age=0" in c]
        assert {c.split("=", 1)[0] for c in cleared} == {"session", "csrf"}
        assert client.get_cookie("session") is None

        assert client.get("/dashboard").status_code == 302


def test_login_with_missing_fields(app, admin) -> None:
    with app.test_client() as client:
        response = client.post("/login", data={"username": "  ", "password": ""})

    assert response.status_code == 400
    assert response.get_json() == {"ok": False, "message": "credentials_required"}


def test_list_users_requires_admin_session(app, admin) -> None:
    with app.test_client() as client:
        anonymous = client.get("/api/users")
        login(client)
        listed = client.get("/api/users")

    assert anonymous.status_code == 401
    assert listed.get_json()["ok"] is True
    assert listed.get_json()["users"][0]["username"] == "admin"
    assert "password_hash" not in listed.get_json()["users"][0]


def test_invalid_input_returns_action_result(app, admin) -> None:
    with app.test_client() as client:
        login(client)
        response = client.post("/api/posts", json={"title": "", "csrf": csrf_of(client)})

    assert response.status_code == 422
    assert response.get_json()["ok"] is False
    assert response.get_json()["message"] == "title_required"


def test_login_page_drops_target_with_control_characters(app) -> None:
    with app.test_client() as client:
        body = client.get("/login", query_string={"from": "/\t/evil.example.com"}).get_json()

    assert body["next"] == "/dashboard"
