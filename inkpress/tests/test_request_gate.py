from __future__ import annotations

from flask import Flask, g, jsonify, request
import pytest

from fakes import SECRET, FakeClock

from inkpress.domain.users.entities import Role
from inkpress.infrastructure.auth.session_codec import SessionCodec
from inkpress.shared.middleware.request_gate import (
    GateRequest,
    RequestGate,
    classify_path,
    configure_request_gate,
)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def codec(clock: FakeClock) -> SessionCodec:
    return SessionCodec(SECRET, clock=clock)


@pytest.fixture()
def gate(codec: SessionCodec) -> RequestGate:
    return RequestGate(
        codec,
        supported_locales=("zh", "en"),
        default_locale="zh",
        token_factory=lambda: "fresh-csrf",
    )


def _cookie_names(decision) -> set[str]:
    return {patch.name for patch in decision.cookies}


@pytest.mark.parametrize(
    ("path", "kind"),
    [
        ("/login", "login"),
        ("/dashboard", "protected"),
        ("/writing/123", "protected"),
        ("/users", "protected"),
        ("/logout", "protected"),
        ("/", "public"),
        ("/blog/1", "public"),
        ("/api/posts", "public"),
    ],
)
def test_classify_path(path: str, kind: str) -> None:
    assert classify_path(path) == kind


def test_authenticated_login_visit_redirects_to_dashboard(
    gate: RequestGate, codec: SessionCodec
) -> None:
    token = codec.sign("u1", "alice", Role.ADMIN)

    decision = gate.evaluate(GateRequest(path="/login", cookies={"session": token}))

    assert decision.is_redirect
    assert decision.location == "/dashboard"
    assert _cookie_names(decision) == {"csrf"}


def test_authenticated_login_visit_keeps_existing_csrf(
    gate: RequestGate, codec: SessionCodec
) -> None:
    token = codec.sign("u1", "alice", Role.ADMIN)

    decision = gate.evaluate(
        GateRequest(path="/login", cookies={"session": token, "csrf": "existing"})
    )

    assert decision.location == "/dashboard"
    assert decision.cookies == ()


def test_anonymous_protected_visit_redirects_to_login(gate: RequestGate) -> None:
    decision = gate.evaluate(GateRequest(path="/dashboard"))

    assert decision.is_redirect
    assert decision.location == "/login?from=%2Fdashboard"
    assert decision.cookies == ()


def test_expired_session_is_anonymous(
    gate: RequestGate, codec: SessionCodec, clock: FakeClock
) -> None:
    token = codec.sign("u1", "alice", Role.ADMIN)
    clock.advance(hours=9)

    decision = gate.evaluate(GateRequest(path="/users", cookies={"session": token}))

    assert decision.location == "/login?from=%2Fusers"


def test_malformed_session_is_anonymous_on_public_page(gate: RequestGate) -> None:
    decision = gate.evaluate(GateRequest(path="/", cookies={"session": "garbage"}))

    assert not decision.is_redirect
    assert decision.claims is None
    assert "csrf" not in _cookie_names(decision)


def test_pass_through_sets_locale_header_and_cookie(gate: RequestGate) -> None:
    decision = gate.evaluate(
        GateRequest(path="/blog", headers={"Accept-Language": "en-US,en;q=0.9"})
    )

    assert decision.kind == "pass"
    assert decision.locale == "en"
    assert decision.request_headers == {"X-Inkpress-Locale": "en"}
    (patch,) = decision.cookies
    assert (patch.name, patch.value, patch.max_age) == ("locale", "en", 60 * 60 * 24 * 365)


def test_existing_locale_cookie_is_not_reissued(gate: RequestGate) -> None:
    decision = gate.evaluate(
        GateRequest(
            path="/blog",
            cookies={"locale": "en"},
            headers={"Accept-Language": "zh-CN,zh;q=0.9"},
        )
    )

    assert decision.locale == "en"
    assert decision.cookies == ()


def test_authenticated_pass_through_issues_missing_csrf(
    gate: RequestGate, codec: SessionCodec
) -> None:
    token = codec.sign("u1", "alice", Role.USER)

    decision = gate.evaluate(
        GateRequest(path="/dashboard", cookies={"session": token, "locale": "zh"})
    )

    assert decision.kind == "pass"
    assert decision.claims is not None and decision.claims.subject == "u1"
    (patch,) = decision.cookies
    assert patch.name == "csrf"
    assert patch.value == "fresh-csrf"
    assert patch.http_only is False
    assert patch.max_age == 60 * 60 * 8


def test_transient_query_params_are_stripped(gate: RequestGate) -> None:
    decision = gate.evaluate(
        GateRequest(path="/blog", query=[("_lang", "en"), ("page", "2"), ("_ts", "1")])
    )

    assert decision.is_redirect
    assert decision.location == "/blog?page=2"


def test_transient_only_query_redirects_to_bare_path(gate: RequestGate) -> None:
    decision = gate.evaluate(GateRequest(path="/", query=[("_ts", "123")]))

    assert decision.location == "/"


@pytest.fixture()
def gated_app(gate: RequestGate) -> Flask:
    app = Flask(__name__)
    configure_request_gate(app, gate)

    @app.get("/")
    def home():
        return jsonify(
            {
                "locale": g.locale,
                "header": request.headers.get("X-Inkpress-Locale"),
                "user": g.session_claims.username if g.session_claims else None,
            }
        )

    @app.get("/dashboard")
    def dashboard():
        return jsonify({"ok": True})

    @app.get("/static/app.js")
    def asset():
        return "js"

    return app


def test_flask_gate_redirects_anonymous_dashboard(gated_app: Flask) -> None:
    with gated_app.test_client() as client:
        response = client.get("/dashboard")

    assert response.status_code == 302
    assert response.headers["Location"] == "/login?from=%2Fdashboard"


def test_flask_gate_injects_locale(gated_app: Flask) -> None:
    with gated_app.test_client() as client:
        response = client.get("/", headers={"Accept-Language": "en"})

    assert response.get_json() == {"locale": "en", "header": "en", "user": None}
    cookies = response.headers.getlist("Set-Cookie")
    assert any(c.startswith("locale=en") for c in cookies)


def test_flask_gate_authenticated_request(gated_app: Flask, codec: SessionCodec) -> None:
    with gated_app.test_client() as client:
        client.set_cookie("session", codec.sign("u1", "alice", Role.ADMIN))
        client.set_cookie("locale", "zh")
        response = client.get("/")

    assert response.get_json()["user"] == "alice"
    cookies = response.headers.getlist("Set-Cookie")
    assert [c.split("=", 1)[0] for c in cookies] == ["csrf"]


def test_flask_gate_skips_static_assets(gated_app: Flask) -> None:
    with gated_app.test_client() as client:
        response = client.get("/static/app.js")

    assert response.status_code == 200
    assert response.headers.getlist("Set-Cookie") == []
