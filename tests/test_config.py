from __future__ import annotations

import logging
from pathlib import Path

import pytest

from adapt import config
from adapt.config import AdaptConfig, ConfigError, get_config, init_config


def test_defaults() -> None:
    cfg = AdaptConfig()
    assert cfg.debug is False
    assert cfg.console_level == logging.INFO
    assert cfg.log_file is None
    assert cfg.env_prefix == "ADAPT_"


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ADAPT_DEBUG", "1")
    monkeypatch.setenv("ADAPT_LOG_FILE", str(tmp_path / "mylogs" / "run.log"))

    cfg = AdaptConfig.from_env()

    assert cfg.debug is True
    assert cfg.console_level == logging.DEBUG
    assert cfg.log_file == tmp_path / "mylogs" / "run.log"


def test_from_env_invalid_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    base = AdaptConfig(console_level=logging.WARNING, debug=False)

    monkeypatch.setenv("ADAPT_LOG_LEVEL", "loud")   # unknown -> fallback
    monkeypatch.setenv("ADAPT_DEBUG", "false")

    cfg = AdaptConfig.from_env(default=base)

    assert cfg.console_level == logging.WARNING
    assert cfg.debug is False


def test_from_env_level_name_is_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ADAPT_DEBUG", raising=False)
    monkeypatch.setenv("ADAPT_LOG_LEVEL", "error")
    assert AdaptConfig.from_env().console_level == logging.ERROR


def test_from_env_respects_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    base = AdaptConfig(env_prefix="MYTOOL_")

    monkeypatch.setenv("MYTOOL_DEBUG", "1")
    monkeypatch.setenv("ADAPT_DEBUG", "0")

    cfg = AdaptConfig.from_env(default=base)

    assert cfg.debug is True
    assert cfg.env_prefix == "MYTOOL_"


def test_init_config_is_init_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "_active", None)

    first = init_config(AdaptConfig(debug=True))
    assert get_config() is first
    assert init_config() is first
    assert init_config(AdaptConfig(debug=True)) is first

    with pytest.raises(ConfigError, match="already initialized"):
        init_config(AdaptConfig(debug=False))


def test_get_config_initializes_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "_active", None)
    monkeypatch.setenv("ADAPT_DEBUG", "1")

    cfg = get_config()

    assert cfg.debug is True
    assert get_config() is cfg
