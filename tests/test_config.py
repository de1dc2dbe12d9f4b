"""
Unit tests for settings loading.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from taskpilot.config import load_settings

_KEYS = ("BOT_TOKEN", "TZ", "DB_PATH", "DEFAULT_FOCUS_MINUTES", "LOG_LEVEL")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("", encoding="utf-8")
    return str(env_file)


def test_defaults_without_token_requirement(clean_env):
    settings = load_settings(require_bot_token=False, env_file=clean_env)

    assert settings.bot_token == ""
    assert settings.timezone == "Europe/Helsinki"
    assert settings.db_path == Path("data/taskpilot.db")
    assert settings.default_focus_minutes == 240
    assert settings.log_level == "INFO"


def test_values_from_env_file(clean_env):
    Path(clean_env).write_text("BOT_TOKEN=abc\nDEFAULT_FOCUS_MINUTES=90\nLOG_LEVEL=debug\n", encoding="utf-8")
    settings = load_settings(env_file=clean_env)

    assert settings.bot_token == "abc"
    assert settings.default_focus_minutes == 90
    assert settings.log_level == "DEBUG"


def test_missing_token_raises(clean_env):
    with pytest.raises(RuntimeError):
        load_settings(env_file=clean_env)


@pytest.mark.parametrize("value", ["soon", "0"])
def test_bad_focus_minutes_raise(clean_env, monkeypatch, value):
    monkeypatch.setenv("DEFAULT_FOCUS_MINUTES", value)
    with pytest.raises(RuntimeError):
        load_settings(require_bot_token=False, env_file=clean_env)
