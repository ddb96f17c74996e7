from __future__ import annotations

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "env, expected",
    [
        ("development", "config.development"),
        ("local", "config.development"),
        (" Testing ", "config.testing"),
        ("ci", "config.testing"),
        ("PROD", "config.production"),
        ("staging", "config.production"),
    ],
)
def test_app_env_selects_settings_module(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == expected


def test_unset_app_env_is_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)

    assert get_settings_module() == "config.development"


def test_unknown_app_env_fails_loudly(monkeypatch):
    monkeypatch.setenv("APP_ENV", "qa")

    with pytest.raises(RuntimeError, match="Unknown APP_ENV 'qa'"):
        get_settings_module()
