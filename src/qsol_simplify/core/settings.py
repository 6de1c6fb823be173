"""Centralized configuration for qsol-simplify using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

The values here are only *defaults* for the outer surfaces (CLI, HTTP API,
stdio worker). The core functions take every knob as an explicit argument.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class OracleKind(str, Enum):
    """Which rewrite backend the oracle factory should build."""

    AUTO = "auto"
    LLM = "llm"
    LEXICAL = "lexical"


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `QSOL_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    num_paths : int
        Default number of exploration paths; maps from `QSOL_NUM_PATHS`.
    target_score : float
        Default Flesch reading-ease target; maps from `QSOL_TARGET_SCORE`.
    oracle_backend : OracleKind
        `auto` picks the LLM backend when an API key is present and the
        offline lexical backend otherwise; maps from `QSOL_ORACLE`.
    oracle_model : str
        Model alias (or concrete model id) used by the LLM backend.
    oracle_timeout_seconds : float
        Per-request timeout for the LLM backend and the per-path wait limit
        of the parallel explorer.
    parallel_paths : int
        Worker threads used by the explorer. `1` keeps exploration sequential.
    """

    environment: EnvName = Field(default="dev", alias="QSOL_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    num_paths: int = Field(default=3, ge=1, alias="QSOL_NUM_PATHS")
    target_score: float = Field(default=80.0, alias="QSOL_TARGET_SCORE")

    oracle_backend: OracleKind = Field(default=OracleKind.AUTO, alias="QSOL_ORACLE")
    oracle_model: str = Field(default="simplifier", alias="QSOL_ORACLE_MODEL")
    oracle_timeout_seconds: float = Field(default=30.0, gt=0.0, alias="QSOL_ORACLE_TIMEOUT")
    oracle_base_temperature: float = Field(default=0.3, ge=0.0, alias="QSOL_BASE_TEMPERATURE")
    oracle_temperature_step: float = Field(default=0.2, ge=0.0, alias="QSOL_TEMPERATURE_STEP")
    oracle_max_temperature: float = Field(default=1.2, ge=0.0, alias="QSOL_MAX_TEMPERATURE")
    max_input_chars: int = Field(default=2048, ge=1, alias="QSOL_MAX_INPUT_CHARS")

    parallel_paths: int = Field(default=1, ge=1, alias="QSOL_PARALLEL_PATHS")

    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    os.environ.setdefault("QSOL_ENV", "dev")
    return Settings()


# Import-time read of env / .env files.
settings: Settings = load_settings()


def get_logger(name: str = "qsol_simplify") -> logging.Logger:
    """Return a process-global logger configured to the current log level.

    Handlers write to stderr so the stdio worker keeps stdout clean for its
    JSON response.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
