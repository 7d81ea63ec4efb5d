"""Tests for conf.json loading and Settings integration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic_settings import BaseSettings as _BaseSettings

from config import (
    FlowcanvasConfig,
    Settings,
    get_flowcanvas_dir,
    load_conf,
    save_conf,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_flowcanvas_dir(tmp_path, monkeypatch):
    """Point FLOWCANVAS_DIR to tmp_path so tests never touch the real config."""
    monkeypatch.setenv("FLOWCANVAS_DIR", str(tmp_path / "flowcanvas"))


# ---------------------------------------------------------------------------
# get_flowcanvas_dir
# ---------------------------------------------------------------------------


def test_get_flowcanvas_dir_default(monkeypatch):
    monkeypatch.delenv("FLOWCANVAS_DIR", raising=False)
    assert get_flowcanvas_dir() == Path.home() / ".config" / "flowcanvas"


def test_get_flowcanvas_dir_env_override(monkeypatch, tmp_path):
    custom = tmp_path / "custom_dir"
    monkeypatch.setenv("FLOWCANVAS_DIR", str(custom))
    assert get_flowcanvas_dir() == custom


# ---------------------------------------------------------------------------
# load_conf / save_conf
# ---------------------------------------------------------------------------


def test_load_conf_defaults(tmp_path, monkeypatch):
    """No conf.json file → FlowcanvasConfig uses built-in defaults."""
    monkeypatch.setenv("FLOWCANVAS_DIR", str(tmp_path / "nonexistent"))
    conf = load_conf()
    assert conf.log_level == ""
    assert conf.cors_allow_all_origins is None
    assert conf.session_ttl_seconds is None
    assert conf.max_expression_length is None


def test_load_conf_from_file(tmp_path, monkeypatch):
    flowcanvas_dir = tmp_path / "flowcanvas"
    flowcanvas_dir.mkdir(parents=True)
    monkeypatch.setenv("FLOWCANVAS_DIR", str(flowcanvas_dir))

    data = {"log_level": "DEBUG", "session_ttl_seconds": 120, "max_expression_length": 500}
    (flowcanvas_dir / "conf.json").write_text(json.dumps(data))

    conf = load_conf()
    assert conf.log_level == "DEBUG"
    assert conf.session_ttl_seconds == 120
    assert conf.max_expression_length == 500


def test_load_conf_invalid_json(tmp_path, monkeypatch, caplog):
    """Malformed JSON → falls back to defaults and logs a warning."""
    flowcanvas_dir = tmp_path / "flowcanvas"
    flowcanvas_dir.mkdir(parents=True)
    monkeypatch.setenv("FLOWCANVAS_DIR", str(flowcanvas_dir))

    (flowcanvas_dir / "conf.json").write_text("{not valid json!!!")

    with caplog.at_level("WARNING", logger="config"):
        conf = load_conf()
    assert conf == FlowcanvasConfig()
    assert "Failed to parse" in caplog.text


def test_save_conf_creates_dir(tmp_path, monkeypatch):
    flowcanvas_dir = tmp_path / "deep" / "nested" / "flowcanvas"
    monkeypatch.setenv("FLOWCANVAS_DIR", str(flowcanvas_dir))

    save_conf(FlowcanvasConfig(log_level="WARNING"))

    assert (flowcanvas_dir / "conf.json").exists()


def test_save_conf_roundtrip():
    original = FlowcanvasConfig(
        log_level="WARNING",
        log_file="/tmp/flowcanvas-test.log",
        cors_allow_all_origins=False,
        session_ttl_seconds=0,
        max_expression_length=64,
    )
    save_conf(original)
    assert load_conf() == original


# ---------------------------------------------------------------------------
# Settings integration
# ---------------------------------------------------------------------------


def test_settings_defaults(monkeypatch):
    for name in ("SESSION_TTL_SECONDS", "MAX_EXPRESSION_LENGTH", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.DEBUG is False
    assert s.LOG_MAX_BYTES == 10_485_760
    assert s.LOG_BACKUP_COUNT == 5


def test_env_var_overrides_defaults(monkeypatch):
    monkeypatch.setenv("SESSION_TTL_SECONDS", "30")
    monkeypatch.setenv("MAX_EXPRESSION_LENGTH", "10")
    s = Settings()
    assert s.SESSION_TTL_SECONDS == 30
    assert s.MAX_EXPRESSION_LENGTH == 10


def test_env_var_overrides_conf_json(tmp_path, monkeypatch):
    """conf.json + env var both set → env var wins."""
    flowcanvas_dir = tmp_path / "flowcanvas"
    flowcanvas_dir.mkdir(parents=True)
    (flowcanvas_dir / "conf.json").write_text(json.dumps({"session_ttl_seconds": 99}))
    conf = load_conf()
    assert conf.session_ttl_seconds == 99

    # conf.json only supplies the Python default; pydantic-settings reads env vars on top
    monkeypatch.setenv("SESSION_TTL_SECONDS", "7")
    default = conf.session_ttl_seconds if conf.session_ttl_seconds is not None else 3600

    class TestSettings(_BaseSettings):
        SESSION_TTL_SECONDS: int = default

    assert TestSettings().SESSION_TTL_SECONDS == 7


def test_zero_ttl_from_conf_is_kept(tmp_path, monkeypatch):
    """session_ttl_seconds: 0 in conf.json → 0, not the 3600 fallback."""
    flowcanvas_dir = tmp_path / "flowcanvas"
    flowcanvas_dir.mkdir(parents=True)
    (flowcanvas_dir / "conf.json").write_text(json.dumps({"session_ttl_seconds": 0}))

    conf = load_conf()
    ttl = conf.session_ttl_seconds if conf.session_ttl_seconds is not None else 3600
    assert ttl == 0
