# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEV_SIGNING_KEY = "dev-signing-key-change-me-0123456789abcdef"

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///users.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    timeout: float = Field(5.0, ge=0.1, alias="DATABASE_TIMEOUT")

    model_config = _SECTION_CONFIG


class CacheConfig(BaseSettings):
    url: str = Field("memory://", alias="CACHE_URL")
    timeout: float = Field(5.0, ge=0.1, alias="CACHE_TIMEOUT")

    model_config = _SECTION_CONFIG

    @field_validator("url")
    @classmethod
    def _known_scheme(cls, value: str) -> str:
        if not value.startswith(("memory://", "redis://", "rediss://", "unix://")):
            raise ValueError("CACHE_URL must be memory:// or a redis URL")
        return value

    def is_redis(self) -> bool:
        return self.url.startswith(("redis://", "rediss://", "unix://"))


class SessionConfig(BaseSettings):
    signing_key: str = Field(_DEV_SIGNING_KEY, alias="JWT_SIGNING_KEY")
    issuer: str = Field("rso-bicycle:users", alias="JWT_ISSUER")
    ttl_seconds: int = Field(60 * 60 * 24 * 7, ge=1, alias="SESSION_TTL_SECONDS")

    model_config = _SECTION_CONFIG

    @field_validator("signing_key")
    @classmethod
    def _require_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT_SIGNING_KEY must not be empty")
        return value


class ActivationConfig(BaseSettings):
    ttl_seconds: int = Field(60 * 60 * 24, ge=1, alias="ACTIVATION_CODE_TTL_SECONDS")

    model_config = _SECTION_CONFIG


class SecurityConfig(BaseSettings):
    # werkzeug method string; scrypt with N=2**15, r=8, p=1
    password_hash_method: str = Field("scrypt:32768:8:1", alias="PASSWORD_HASH_METHOD")

    model_config = _SECTION_CONFIG


class ServerConfig(BaseSettings):
    public_host: str = Field("0.0.0.0", alias="PUBLIC_HOST")
    public_port: int = Field(8080, ge=1, le=65535, alias="PUBLIC_PORT")
    internal_host: str = Field("0.0.0.0", alias="INTERNAL_HOST")
    internal_port: int = Field(8081, ge=1, le=65535, alias="INTERNAL_PORT")
    health_timeout: float = Field(2.0, ge=0.1, alias="HEALTH_TIMEOUT")

    model_config = _SECTION_CONFIG


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")

    model_config = _SECTION_CONFIG

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_metrics_enabled(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    activation: ActivationConfig = Field(default_factory=ActivationConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self
        if self.session.signing_key == _DEV_SIGNING_KEY:
            raise ValueError("JWT_SIGNING_KEY must be set to a strong random value in production")
        if not self.cache.is_redis():
            raise ValueError("CACHE_URL must point at Redis in production")
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "ActivationConfig",
    "AppConfig",
    "CacheConfig",
    "DatabaseConfig",
    "ObservabilityConfig",
    "SecurityConfig",
    "ServerConfig",
    "SessionConfig",
    "load_config",
]
