"""
Environment configuration for audiotrim.

Values are read from ``AUDIOTRIM_*`` environment variables (optionally from a
``.env`` file in the working directory) each time they are requested, so
tests and long-running callers can change them without re-importing:

- AUDIOTRIM_STRATEGY: detector strategy name (default: "energy")
- AUDIOTRIM_THRESHOLD_PRESET: "quiet", "default" or "moderate" (default: "default")
- AUDIOTRIM_MIN_DURATION_MS: float (default: 300)
- AUDIOTRIM_WINDOW_SIZE_MS: float (default: 50)
- AUDIOTRIM_LOG_LEVEL: logging level name (default: "INFO")
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv  # type: ignore

from audiotrim.silence.schema import (
    DEFAULT_MIN_DURATION_MS,
    DEFAULT_WINDOW_SIZE_MS,
    DetectionOptions,
)

logger = logging.getLogger(__name__)

load_dotenv(Path.cwd() / ".env")

DEFAULT_STRATEGY = "energy"
DEFAULT_PRESET = "default"
DEFAULT_LOG_LEVEL = "INFO"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


def get_strategy() -> str:
    return os.getenv("AUDIOTRIM_STRATEGY", DEFAULT_STRATEGY).strip().lower() or DEFAULT_STRATEGY


def get_threshold_preset() -> str:
    return (
        os.getenv("AUDIOTRIM_THRESHOLD_PRESET", DEFAULT_PRESET).strip().lower() or DEFAULT_PRESET
    )


def get_log_level() -> str:
    raw = os.getenv("AUDIOTRIM_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    level = raw.strip().upper() or DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Ignoring invalid AUDIOTRIM_LOG_LEVEL=%r; using %s", raw, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def default_options() -> DetectionOptions:
    """Detection options built from the environment."""
    return DetectionOptions.from_preset(
        get_threshold_preset(),
        min_duration_ms=_env_float("AUDIOTRIM_MIN_DURATION_MS", DEFAULT_MIN_DURATION_MS),
        window_size_ms=_env_float("AUDIOTRIM_WINDOW_SIZE_MS", DEFAULT_WINDOW_SIZE_MS),
    )
