"""Typed smoke tests for the settings loader.

These tests verify four guarantees:
1) Importing the module-level `settings` yields a `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) Invalid values are rejected by validation.
4) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest
from pydantic import ValidationError

from qsol_simplify.core.settings import (
    OracleKind,
    Settings,
    get_logger,
    load_settings,
    settings,
)


def test_settings_instance_type() -> None:
    """`settings` should be an instance of the typed `Settings` model."""
    assert isinstance(settings, Settings)


def test_defaults_without_env(monkeypatch: Any) -> None:
    for name in ("QSOL_NUM_PATHS", "QSOL_TARGET_SCORE", "QSOL_ORACLE", "QSOL_PARALLEL_PATHS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings(_env_file=None)  # type: ignore[call-arg]

    assert s.num_paths == 3
    assert s.target_score == 80.0
    assert s.oracle_backend is OracleKind.AUTO
    assert s.parallel_paths == 1


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("QSOL_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("QSOL_NUM_PATHS", "5")
    monkeypatch.setenv("QSOL_TARGET_SCORE", "65.5")
    monkeypatch.setenv("QSOL_ORACLE", "lexical")

    load_settings.cache_clear()
    try:
        s = load_settings()
        assert s.environment == "test"
        assert s.is_test and not s.is_dev and not s.is_prod
        assert s.log_level == "DEBUG"
        assert s.num_paths == 5
        assert s.target_score == 65.5
        assert s.oracle_backend is OracleKind.LEXICAL
    finally:
        monkeypatch.undo()
        load_settings.cache_clear()


def test_invalid_num_paths_is_rejected(monkeypatch: Any) -> None:
    monkeypatch.setenv("QSOL_NUM_PATHS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should set the logger level from LOG_LEVEL."""
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    load_settings.cache_clear()
    try:
        logger = get_logger("qsol_simplify.test")
        assert logger.level == logging.WARNING
        assert logger.handlers, "logger should carry a stderr handler"
        assert logger.propagate is False
    finally:
        monkeypatch.undo()
        load_settings.cache_clear()
