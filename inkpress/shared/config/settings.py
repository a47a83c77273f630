# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_NESTED = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


def _parse_list(value: str | list[str] | tuple[str, ...]) -> list[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///inkpress.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _NESTED


class AuthConfig(BaseSettings):
    secret: str | None = Field(None, alias="AUTH_SECRET")
    session_ttl_seconds: int = Field(60 * 60 * 8, ge=1, alias="SESSION_TTL_SECONDS")

    # Login throttling
    login_max_attempts: int = Field(5, ge=1, alias="LOGIN_MAX_ATTEMPTS")
    login_window_seconds: float = Field(5 * 60, ge=1.0, alias="LOGIN_WINDOW_SECONDS")

    model_config = _NESTED


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # CSRF double submit
    csrf_header_name: str = Field("X-CSRF-Token", alias="CSRF_HEADER_NAME")

    # Client identity for rate limiting
    trust_proxy_headers: bool = Field(False, alias="TRUST_PROXY_HEADERS")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _NESTED

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        return _parse_list(value)

    @field_validator("cookie_secure", "trust_proxy_headers", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class LocaleConfig(BaseSettings):
    supported: Annotated[list[str], NoDecode] = Field(["zh", "en"], alias="SUPPORTED_LOCALES")
    default: str = Field("zh", alias="DEFAULT_LOCALE")

    model_config = _NESTED

    @field_validator("supported", mode="before")
    @classmethod
    def _parse_supported(cls, value: str | list[str]) -> list[str]:
        return [item.lower() for item in _parse_list(value)]

    @model_validator(mode="after")
    def _default_is_supported(self) -> "LocaleConfig":
        self.default = self.default.lower()
        if self.default not in self.supported:
            raise ValueError(
                f"DEFAULT_LOCALE '{self.default}' is not one of {self.supported}"
            )
        return self


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _locale_config_factory() -> LocaleConfig:
    return LocaleConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    seed_admin_username: str = Field("admin", alias="SEED_ADMIN_USERNAME")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    locale: LocaleConfig = Field(default_factory=_locale_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        validate_by_name=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def secure_cookies(self) -> bool:
        return self.security.cookie_secure or self.is_production()


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "LocaleConfig",
    "SecurityConfig",
    "load_config",
]
