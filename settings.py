"""
settings.py - Runtime configuration for the conformance gate.

Values come from the environment (optionally a local .env file) and can be
overridden by CLI flags in main.py:

    CONFORMANCE_NAMESPACE             package to scan (default: checkout)
    CONFORMANCE_CODEC_A               first codec adapter (default: pydantic)
    CONFORMANCE_CODEC_B               second codec adapter (default: orjson)
    CONFORMANCE_WORKERS               thread pool size for the checks (default: 4)
    CONFORMANCE_FLAG_BOTH_UNDECLARED  report constants neither codec can emit (default: true)
    LOG_LEVEL                         logging level name (default: INFO)
    LOG_JSON                          emit JSON log lines (default: false)
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_NAMESPACE = "checkout"
DEFAULT_CODEC_A = "pydantic"
DEFAULT_CODEC_B = "orjson"
DEFAULT_WORKERS = 4

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Settings(BaseModel):
    """Resolved configuration for one checker run."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)
    codec_a: str = DEFAULT_CODEC_A
    codec_b: str = DEFAULT_CODEC_B
    workers: int = Field(default=DEFAULT_WORKERS, ge=1, le=64)
    flag_both_undeclared: bool = True
    log_level: str = "INFO"
    log_json: bool = False


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning("settings_warning | variable=%s | value=%r | fallback=%s", name, raw, default)
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings from the environment, reading a .env file first when present."""
    try:
        load_dotenv(env_file)
    except UnicodeDecodeError:
        # Fallback for legacy Windows-encoded .env files.
        load_dotenv(env_file, encoding="cp1252")

    settings = Settings(
        namespace=os.getenv("CONFORMANCE_NAMESPACE", "").strip() or DEFAULT_NAMESPACE,
        codec_a=os.getenv("CONFORMANCE_CODEC_A", "").strip().lower() or DEFAULT_CODEC_A,
        codec_b=os.getenv("CONFORMANCE_CODEC_B", "").strip().lower() or DEFAULT_CODEC_B,
        workers=_env_int("CONFORMANCE_WORKERS", DEFAULT_WORKERS),
        flag_both_undeclared=_env_flag("CONFORMANCE_FLAG_BOTH_UNDECLARED", True),
        log_level=os.getenv("LOG_LEVEL", "").strip() or "INFO",
        log_json=_env_flag("LOG_JSON", False),
    )
    logger.debug(
        "settings_loaded | namespace=%s | codec_a=%s | codec_b=%s | workers=%s | flag_both_undeclared=%s",
        settings.namespace,
        settings.codec_a,
        settings.codec_b,
        settings.workers,
        settings.flag_both_undeclared,
    )
    return settings
