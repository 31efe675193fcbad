# tests/unit/core/test_config.py
"""Start-up validation of the authentication settings."""

from __future__ import annotations

import pytest

from shopcart.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    get_config,
    is_production,
    validate_settings,
)

STRONG_SECRET = "x" * 40


def _config(**overrides):
    base = {
        "ENV_NAME": "development",
        "ACCESS_TOKEN_TTL_SECONDS": 900,
        "REFRESH_TOKEN_TTL_SECONDS": 30 * 86400,
        "JWT_SECRET_KEY": STRONG_SECRET,
        "GOOGLE_CLIENT_ID": "client",
        "UNSAFE_DEV_AUTH": False,
        "DEV_AUTH_SENTINEL": None,
    }
    base.update(overrides)
    return base


def test_defaults_are_valid():
    validate_settings(_config())


@pytest.mark.parametrize(
    "overrides",
    [
        {"ACCESS_TOKEN_TTL_SECONDS": 0},
        {"REFRESH_TOKEN_TTL_SECONDS": -1},
        {"ACCESS_TOKEN_TTL_SECONDS": 3600, "REFRESH_TOKEN_TTL_SECONDS": 3600},
        {"UNSAFE_DEV_AUTH": True},
        {"UNSAFE_DEV_AUTH": True, "DEV_AUTH_SENTINEL": "s", "ENV_NAME": "production"},
        {"ENV_NAME": "production", "JWT_SECRET_KEY": "short"},
    ],
)
def test_invalid_settings_refuse_to_start(overrides):
    with pytest.raises(RuntimeError):
        validate_settings(_config(**overrides))


def test_unsafe_mode_with_sentinel_is_allowed_outside_production():
    validate_settings(_config(UNSAFE_DEV_AUTH=True, DEV_AUTH_SENTINEL="s"))


def test_truthy_string_does_not_enable_unsafe_mode():
    # Only a real boolean switches the bypass on
    validate_settings(_config(UNSAFE_DEV_AUTH="true"))


def test_short_secret_only_warns_outside_production(caplog):
    validate_settings(_config(JWT_SECRET_KEY="short"))

    assert "JWT_SECRET_KEY is shorter" in caplog.text


def test_is_production():
    assert is_production({"ENV_NAME": "production"})
    assert not is_production({"ENV_NAME": "development"})
    assert not is_production({})


@pytest.mark.parametrize(
    "value, expected",
    [("development", DevelopmentConfig), ("testing", TestingConfig), ("PRODUCTION", ProductionConfig), ("other", DevelopmentConfig)],
)
def test_get_config_reads_app_env(monkeypatch, value, expected):
    monkeypatch.setenv("APP_ENV", value)

    assert get_config() is expected


@pytest.mark.parametrize("raw, expected", [("1", True), ("Yes", True), ("off", False), ("", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SOME_FLAG", raw)

    assert env_bool("SOME_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("SOME_FLAG", raising=False)

    assert env_bool("SOME_FLAG", True) is True


def test_production_hard_disables_bypass():
    assert ProductionConfig.UNSAFE_DEV_AUTH is False
    assert ProductionConfig.DEV_AUTH_SENTINEL is None
