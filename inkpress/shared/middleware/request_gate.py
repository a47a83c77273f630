# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request authentication, locale and cookie gate.

``RequestGate.evaluate`` is a pure function of the inbound request: it returns
a ``GateDecision`` (pass through or redirect, plus cookie patches) and never
touches a framework response. ``configure_request_gate`` applies decisions to
a Flask app.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, Protocol
from urllib.parse import urlencode

from flask import Flask, Response, g, redirect, request

from inkpress.domain.users.entities import SessionClaims
from inkpress.shared.i18n import (
    LOCALE_COOKIE,
    LOCALE_COOKIE_MAX_AGE,
    LOCALE_HEADER,
    resolve_locale,
)
from inkpress.shared.logging import logger

from .csrf import CSRF_COOKIE, generate_csrf_token

SESSION_COOKIE = "session"
AUTH_COOKIE_MAX_AGE = 60 * 60 * 8

LOGIN_PATH = "/login"
DEFAULT_LANDING = "/dashboard"
PROTECTED_PREFIXES: tuple[str, ...] = (
    "/dashboard",
    "/writing",
    "/projects",
    "/project-list",
    "/blog-list",
    "/categories",
    "/users",
    "/logout",
)
EXEMPT_PREFIXES: tuple[str, ...] = ("/static/",)
EXEMPT_PATHS: frozenset[str] = frozenset({"/favicon.ico", "/robots.txt", "/sitemap.xml"})
TRANSIENT_QUERY_PARAMS: frozenset[str] = frozenset({"_lang", "_ts"})

PathKind = Literal["login", "protected", "public"]


class SessionVerifier(Protocol):
    def verify(self, token: str | None) -> SessionClaims | None: ...


@dataclass(slots=True, frozen=True)
class CookiePatch:
    name: str
    value: str
    max_age: int
    http_only: bool = False
    secure: bool = False
    same_site: str = "Lax"
    path: str = "/"

    def apply(self, response: Response) -> None:
        response.set_cookie(
            self.name,
            self.value,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site,
        )


@dataclass(slots=True, frozen=True)
class GateRequest:
    path: str
    query: Sequence[tuple[str, str]] = ()
    cookies: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class GateDecision:
    kind: Literal["pass", "redirect"]
    location: str | None = None
    cookies: tuple[CookiePatch, ...] = ()
    request_headers: Mapping[str, str] = field(default_factory=dict)
    locale: str | None = None
    claims: SessionClaims | None = None

    @property
    def is_redirect(self) -> bool:
        return self.kind == "redirect"


def classify_path(path: str) -> PathKind:
    if path == LOGIN_PATH:
        return "login"
    if path.startswith(PROTECTED_PREFIXES):
        return "protected"
    return "public"


def is_exempt(path: str) -> bool:
    return path in EXEMPT_PATHS or path.startswith(EXEMPT_PREFIXES)


def login_redirect_location(original_path: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({'from': original_path})}"


class RequestGate:
    def __init__(
        self,
        verifier: SessionVerifier,
        *,
        supported_locales: Collection[str],
        default_locale: str,
        secure_cookies: bool = False,
        token_factory: Callable[[], str] = generate_csrf_token,
    ) -> None:
        self._verifier = verifier
        self._supported = tuple(supported_locales)
        self._default_locale = default_locale
        self._secure = secure_cookies
        self._token_factory = token_factory

    def _csrf_cookie(self) -> CookiePatch:
        return CookiePatch(
            name=CSRF_COOKIE,
            value=self._token_factory(),
            max_age=AUTH_COOKIE_MAX_AGE,
            secure=self._secure,
        )

    def evaluate(self, req: GateRequest) -> GateDecision:
        token = req.cookies.get(SESSION_COOKIE)
        claims = self._verifier.verify(token) if token else None
        is_authenticated = claims is not None
        has_csrf = bool(req.cookies.get(CSRF_COOKIE))
        kind = classify_path(req.path)

        if kind == "login" and is_authenticated:
            patches = () if has_csrf else (self._csrf_cookie(),)
            return GateDecision(
                kind="redirect", location=DEFAULT_LANDING, cookies=patches, claims=claims
            )

        if kind == "protected" and not is_authenticated:
            return GateDecision(kind="redirect", location=login_redirect_location(req.path))

        cookie_locale = req.cookies.get(LOCALE_COOKIE)
        locale = resolve_locale(
            cookie_locale,
            req.headers.get("Accept-Language"),
            self._supported,
            self._default_locale,
        )

        if any(name in TRANSIENT_QUERY_PARAMS for name, _ in req.query):
            remaining = [(k, v) for k, v in req.query if k not in TRANSIENT_QUERY_PARAMS]
            location = req.path + (f"?{urlencode(remaining)}" if remaining else "")
            return GateDecision(kind="redirect", location=location, locale=locale, claims=claims)

        patches: list[CookiePatch] = []
        if cookie_locale not in self._supported:
            patches.append(
                CookiePatch(
                    name=LOCALE_COOKIE,
                    value=locale,
                    max_age=LOCALE_COOKIE_MAX_AGE,
                    secure=self._secure,
                )
            )
        if is_authenticated and not has_csrf:
            patches.append(self._csrf_cookie())

        return GateDecision(
            kind="pass",
            cookies=tuple(patches),
            request_headers={LOCALE_HEADER: locale},
            locale=locale,
            claims=claims,
        )


def _environ_key(header: str) -> str:
    return "HTTP_" + header.upper().replace("-", "_")


def configure_request_gate(app: Flask, gate: RequestGate) -> None:
    @app.before_request
    def _gate_request():
        if is_exempt(request.path):
            return None

        decision = gate.evaluate(
            GateRequest(
                path=request.path,
                query=list(request.args.items(multi=True)),
                cookies=request.cookies,
                headers=request.headers,
            )
        )
        g.session_claims = decision.claims
        g.locale = decision.locale

        if decision.is_redirect:
            logger.debug(f"gate: redirect {request.path} -> {decision.location}")
            response = redirect(decision.location or DEFAULT_LANDING)
            for patch in decision.cookies:
                patch.apply(response)
            return response

        for name, value in decision.request_headers.items():
            request.environ[_environ_key(name)] = value
        g.gate_cookies = decision.cookies
        return None

    @app.after_request
    def _apply_gate_cookies(response: Response) -> Response:
        already_set = {
            header.split("=", 1)[0].strip()
            for header in response.headers.getlist("Set-Cookie")
        }
        for patch in getattr(g, "gate_cookies", ()):
            if patch.name not in already_set:
                patch.apply(response)
        return response


__all__ = [
    "AUTH_COOKIE_MAX_AGE",
    "DEFAULT_LANDING",
    "LOGIN_PATH",
    "PROTECTED_PREFIXES",
    "SESSION_COOKIE",
    "CookiePatch",
    "GateDecision",
    "GateRequest",
    "RequestGate",
    "classify_path",
    "configure_request_gate",
    "login_redirect_location",
]
