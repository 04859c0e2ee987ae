# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_INSECURE_SECRETS = ("dev", "development", "test", "secret", "change-me", "")
MIN_SECRET_LENGTH = 32


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///mapmarks.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    # startup connectivity probe
    connect_retries: int = Field(5, ge=0, alias="DB_CONNECT_RETRIES")
    connect_backoff_base: float = Field(0.5, ge=0.01, alias="DB_CONNECT_BACKOFF_BASE")
    connect_backoff_cap: float = Field(8.0, ge=0.01, alias="DB_CONNECT_BACKOFF_CAP")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", validate_by_name=True
    )


class AuthConfig(BaseSettings):
    jwt_secret: str = Field("dev", alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    token_ttl_seconds: int = Field(3600, ge=1, alias="TOKEN_TTL_SECONDS")
    session_ttl_seconds: int = Field(3600, ge=1, alias="SESSION_TTL_SECONDS")
    session_cookie_name: str = Field("sid", alias="SESSION_COOKIE_NAME")
    session_backend: Literal["database", "memory"] = Field(
        "database", alias="SESSION_BACKEND"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", validate_by_name=True
    )


class SecurityConfig(BaseSettings):
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    allowed_origins: Annotated[list[str], NoDecode] = Field(
        ["http://localhost:3000"], alias="ALLOWED_ORIGINS"
    )

    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", validate_by_name=True
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        secret = self.auth.jwt_secret
        if secret.lower() in _INSECURE_SECRETS or len(secret) < MIN_SECRET_LENGTH:
            print(
                f"FATAL: JWT_SECRET must be a random string of at least {MIN_SECRET_LENGTH} "
                "characters when APP_ENV=production.",
                file=sys.stderr,
            )
            sys.exit(1)

        for warning in self._production_warnings():
            print(f"WARNING: {warning}", file=sys.stderr)
        return self

    def _production_warnings(self) -> list[str]:
        checks = [
            (
                not self.security.cookie_secure,
                "COOKIE_SECURE is off; the session cookie travels over plain HTTP",
            ),
            ("*" in self.security.allowed_origins, "ALLOWED_ORIGINS contains '*'"),
            (not self.security.enable_hsts, "ENABLE_HSTS is off"),
            (
                self.auth.session_backend == "memory",
                "SESSION_BACKEND=memory; sessions are lost on restart and not shared "
                "between workers",
            ),
        ]
        return [message for failed, message in checks if failed]

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "AuthConfig", "DatabaseConfig", "SecurityConfig", "load_config"]
