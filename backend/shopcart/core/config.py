"""Environment-driven settings classes and start-up validation of the auth settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv

# Selects one of CONFIG_MAP's keys
ENV_VAR: Final[str] = "APP_ENV"

MIN_PRODUCTION_SECRET_BYTES: Final[int] = 32

# A missing .env file is not an error
load_dotenv()

log = logging.getLogger(__name__)


_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """Read a flag; ``default`` when unset, otherwise true only for :data:`_TRUTHY` spellings."""
    raw = os.environ.get(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer; unset or blank yields ``default``."""
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


class BaseConfig:
    """Settings common to every environment.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Mount point of the versioned API (``/api``).
    JWT_SECRET_KEY: str
        HMAC key used by ``flask-jwt-extended`` to sign access tokens.
    ACCESS_TOKEN_TTL_SECONDS: int
        Lifetime of access tokens (minutes scale).
    REFRESH_TOKEN_TTL_SECONDS: int
        Lifetime of stored refresh tokens (days scale).
    GOOGLE_CLIENT_ID: str
        Expected audience of Google ID tokens.
    UNSAFE_DEV_AUTH: bool
        Explicit switch for the development sentinel bypass and the dev login
        endpoint. Never honoured in production.
    DEV_AUTH_SENTINEL: str | None
        Identity token value accepted while ``UNSAFE_DEV_AUTH`` is on.
    REDIS_URL: str | None
        Redis holding refresh tokens. When unset an in-memory store is used.
    TOKEN_SWEEP_ENABLED: bool
        Starts the background refresh-token sweeper.
    TOKEN_SWEEP_HOUR / TOKEN_SWEEP_MINUTE: int
        Daily UTC schedule of the sweeper.
    DATABASE_URL -> SQLALCHEMY_DATABASE_URI: str
        Shopper and cart storage.

    Every value can be overridden from the environment (or ``.env``).
    """

    ENV_NAME = "base"
    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"

    # Session tokens
    ACCESS_TOKEN_TTL_SECONDS = env_int("ACCESS_TOKEN_TTL_SECONDS", 15 * 60)
    REFRESH_TOKEN_TTL_SECONDS = env_int("REFRESH_TOKEN_TTL_SECONDS", 30 * 24 * 3600)

    # Identity provider
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")

    # Development-only bypass (explicit boolean, validated at start-up)
    UNSAFE_DEV_AUTH = env_bool("UNSAFE_DEV_AUTH", False)
    DEV_AUTH_SENTINEL = os.getenv("DEV_AUTH_SENTINEL") or None

    # Stores
    REDIS_URL = os.getenv("REDIS_URL") or None
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Refresh-token sweep (daily, off-peak)
    TOKEN_SWEEP_ENABLED = env_bool("TOKEN_SWEEP_ENABLED", True)
    TOKEN_SWEEP_HOUR = env_int("TOKEN_SWEEP_HOUR", 2)
    TOKEN_SWEEP_MINUTE = env_int("TOKEN_SWEEP_MINUTE", 0)

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "10 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = True

    # Flask
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local development: debug on, bypass still opt-in via ``UNSAFE_DEV_AUTH=1``."""

    ENV_NAME = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """pytest settings: SQLite in memory, in-memory token store, no sweeper, no limits."""

    ENV_NAME = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = "testing-secret-key-with-at-least-32-bytes"
    GOOGLE_CLIENT_ID = "test-client-id.apps.googleusercontent.com"
    REDIS_URL = None
    TOKEN_SWEEP_ENABLED = False
    RATELIMIT_ENABLED = False
    UNSAFE_DEV_AUTH = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Production deployments.

    The unsafe dev bypass is hard-disabled here; :func:`validate_settings`
    additionally refuses to boot if it was re-enabled by instance config.
    """

    ENV_NAME = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    UNSAFE_DEV_AUTH = False
    DEV_AUTH_SENTINEL = None


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Pick the settings class named by ``APP_ENV`` (unknown names mean development)."""
    return CONFIG_MAP.get(os.environ.get(ENV_VAR, "").strip().lower(), DevelopmentConfig)


def is_production(config: Mapping[str, Any]) -> bool:
    """Return ``True`` when the loaded config describes a production deployment."""
    return config.get("ENV_NAME") == "production"


def validate_settings(config: Mapping[str, Any]) -> None:
    """Refuse to start with an unsafe or inconsistent auth configuration.

    :param config: Loaded Flask config mapping.
    :raises RuntimeError: When a check fails.
    """
    access_ttl = int(config.get("ACCESS_TOKEN_TTL_SECONDS", 0))
    refresh_ttl = int(config.get("REFRESH_TOKEN_TTL_SECONDS", 0))
    if access_ttl <= 0 or refresh_ttl <= 0:
        raise RuntimeError("Token TTLs must be positive.")
    if access_ttl >= refresh_ttl:
        raise RuntimeError("ACCESS_TOKEN_TTL_SECONDS must be shorter than REFRESH_TOKEN_TTL_SECONDS.")

    unsafe = config.get("UNSAFE_DEV_AUTH") is True
    if unsafe and is_production(config):
        raise RuntimeError("UNSAFE_DEV_AUTH cannot be enabled in production.")
    if unsafe and not config.get("DEV_AUTH_SENTINEL"):
        raise RuntimeError("UNSAFE_DEV_AUTH requires DEV_AUTH_SENTINEL to be set.")

    secret = str(config.get("JWT_SECRET_KEY") or "")
    if len(secret.encode("utf-8")) < MIN_PRODUCTION_SECRET_BYTES:
        if is_production(config):
            raise RuntimeError(
                f"JWT_SECRET_KEY must be at least {MIN_PRODUCTION_SECRET_BYTES} bytes in production."
            )
        log.warning("JWT_SECRET_KEY is shorter than %d bytes.", MIN_PRODUCTION_SECRET_BYTES)

    if not config.get("GOOGLE_CLIENT_ID"):
        log.warning("GOOGLE_CLIENT_ID is not configured; Google login will always fail.")
