from __future__ import annotations

import pytest

from fakes import (
    SECRET,
    DeterministicHasher,
    FakeClock,
    InMemoryUserRepository,
    MonotonicClock,
    make_user,
)

from inkpress.application.use_cases.users.login_user import (
    LoginUserUseCase,
    safe_redirect_target,
)
from inkpress.domain.users.entities import Role
from inkpress.domain.users.exceptions import (
    AccountDisabledError,
    CredentialsRequiredError,
    InvalidCredentialsError,
    LoginRateLimitedError,
)
from inkpress.infrastructure.auth.login_attempts import InMemoryAttemptStore, LoginRateLimiter
from inkpress.infrastructure.auth.session_codec import SessionCodec


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, "/dashboard"),
        ("", "/dashboard"),
        ("https://evil.example.com", "/dashboard"),
        ("//evil.example.com/path", "/dashboard"),
        ("/\\evil.example.com", "/dashboard"),
        ("/\t/evil.example.com", "/dashboard"),
        ("/\n/evil.example.com", "/dashboard"),
        ("/\r\n/evil.example.com", "/dashboard"),
        ("/\x7f/evil.example.com", "/dashboard"),
        ("/writing draft", "/dashboard"),
        ("javascript:alert(1)", "/dashboard"),
        ("/login", "/dashboard"),
        ("/login?from=%2Fdashboard", "/dashboard"),
        ("/writing", "/writing"),
        ("/users?page=2", "/users?page=2"),
        ("/login-help", "/login-help"),
    ],
)
def test_safe_redirect_target(raw: str | None, expected: str) -> None:
    assert safe_redirect_target(raw) == expected


@pytest.fixture()
def clock() -> MonotonicClock:
    return MonotonicClock()


@pytest.fixture()
def codec() -> SessionCodec:
    return SessionCodec(SECRET, clock=FakeClock())


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository(
        make_user("u1", "alice", role=Role.ADMIN, password="secret123"),
        make_user("u2", "bob", is_active=False, password="secret123"),
    )


@pytest.fixture()
def login(users: InMemoryUserRepository, codec: SessionCodec, clock: MonotonicClock) -> LoginUserUseCase:
    limiter = LoginRateLimiter(InMemoryAttemptStore(), max_attempts=5, window_seconds=300, clock=clock)
    return LoginUserUseCase(
        users=users, password_hasher=DeterministicHasher(), codec=codec, limiter=limiter
    )


def test_login_success_issues_session_and_csrf(login: LoginUserUseCase, codec: SessionCodec) -> None:
    result = login.execute("alice", "secret123", "/writing", client_id="ip")

    claims = codec.verify(result.session_token)
    assert claims is not None and claims.subject == "u1" and claims.role is Role.ADMIN
    assert result.csrf_token
    assert result.next_path == "/writing"
    assert result.user.username == "alice"


def test_login_open_redirect_falls_back(login: LoginUserUseCase) -> None:
    result = login.execute("alice", "secret123", "https://evil.example.com", client_id="ip")

    assert result.next_path == "/dashboard"


def test_unknown_user_and_wrong_password_look_identical(login: LoginUserUseCase) -> None:
    with pytest.raises(InvalidCredentialsError) as unknown:
        login.execute("mallory", "secret123", client_id="ip")
    with pytest.raises(InvalidCredentialsError) as wrong:
        login.execute("alice", "nope", client_id="ip")

    assert unknown.value.to_action_result() == wrong.value.to_action_result()


def test_disabled_account_rejected(login: LoginUserUseCase) -> None:
    with pytest.raises(AccountDisabledError):
        login.execute("bob", "secret123", client_id="ip")


@pytest.mark.parametrize(("username", "password"), [("", "x"), ("alice", ""), ("  ", "x")])
def test_empty_credentials_rejected(login: LoginUserUseCase, username: str, password: str) -> None:
    with pytest.raises(CredentialsRequiredError):
        login.execute(username, password, client_id="ip")


def test_sixth_attempt_rate_limited_even_with_valid_credentials(
    login: LoginUserUseCase, clock: MonotonicClock
) -> None:
    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("alice", "wrong", client_id="203.0.113.5")

    with pytest.raises(LoginRateLimitedError) as exc_info:
        login.execute("alice", "secret123", client_id="203.0.113.5")
    assert exc_info.value.status == 429

    clock.value += 301
    assert login.execute("alice", "secret123", client_id="203.0.113.5").user.id == "u1"


def test_rate_limit_checked_before_field_validation(login: LoginUserUseCase) -> None:
    for _ in range(5):
        with pytest.raises(CredentialsRequiredError):
            login.execute("", "", client_id="ip")

    with pytest.raises(LoginRateLimitedError):
        login.execute("", "", client_id="ip")
