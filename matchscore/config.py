"""
Runtime configuration for the match scoring engine.

Values come from the process environment (optionally seeded from .env via
matchscore.env.load_env). Every tuning knob has a default so the engine runs
with only HF_API_KEY set.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_API_BASE = "https://api-inference.huggingface.co/models"
DEFAULT_SUMMARIZER_MODEL = "facebook/bart-large-cnn"
DEFAULT_SIMILARITY_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
DEFAULT_EDUCATION_MARKER = "computer science"
DEFAULT_DB_PATH = Path("data/matches.db")


def _get_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}")


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}")


def _get_log_level(env: Mapping[str, str], key: str, default: str) -> str:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{key} must be a logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL), got {raw!r}")
    return level


@dataclass(frozen=True)
class Settings:
    """Engine settings. Build with Settings.from_env() in applications."""

    api_key: Optional[str] = None
    api_base: str = DEFAULT_API_BASE
    summarizer_model: str = DEFAULT_SUMMARIZER_MODEL
    similarity_model: str = DEFAULT_SIMILARITY_MODEL
    max_new_tokens: int = 1024
    temperature: float = 0.2
    timeout: float = 30.0
    max_retries: int = 2
    retry_base_delay: float = 1.0
    circuit_failure_threshold: int = 5
    circuit_recovery_timeout: int = 60
    semantic_weight: float = 0.5
    education_marker: str = DEFAULT_EDUCATION_MARKER
    taxonomy_path: Optional[Path] = None
    db_path: Path = DEFAULT_DB_PATH
    log_level: str = "INFO"

    @property
    def rule_weight(self) -> float:
        return 1.0 - self.semantic_weight

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Read settings from environment variables.

        Args:
            env: Mapping to read from (default: os.environ)

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if env is None else env
        taxonomy_path = env.get("MATCHSCORE_TAXONOMY_PATH")
        return cls(
            api_key=env.get("HF_API_KEY") or None,
            api_base=(env.get("MATCHSCORE_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
            summarizer_model=env.get("MATCHSCORE_SUMMARIZER_MODEL") or DEFAULT_SUMMARIZER_MODEL,
            similarity_model=env.get("MATCHSCORE_SIMILARITY_MODEL") or DEFAULT_SIMILARITY_MODEL,
            max_new_tokens=_get_int(env, "MATCHSCORE_MAX_NEW_TOKENS", 1024),
            temperature=_get_float(env, "MATCHSCORE_TEMPERATURE", 0.2),
            timeout=_get_float(env, "MATCHSCORE_TIMEOUT", 30.0),
            max_retries=_get_int(env, "MATCHSCORE_MAX_RETRIES", 2),
            retry_base_delay=_get_float(env, "MATCHSCORE_RETRY_BASE_DELAY", 1.0),
            circuit_failure_threshold=_get_int(env, "MATCHSCORE_CIRCUIT_THRESHOLD", 5),
            circuit_recovery_timeout=_get_int(env, "MATCHSCORE_CIRCUIT_RECOVERY", 60),
            semantic_weight=_get_float(env, "MATCHSCORE_SEMANTIC_WEIGHT", 0.5),
            education_marker=env.get("MATCHSCORE_EDUCATION_MARKER") or DEFAULT_EDUCATION_MARKER,
            taxonomy_path=Path(taxonomy_path) if taxonomy_path else None,
            db_path=Path(env.get("MATCHSCORE_DB_PATH") or DEFAULT_DB_PATH),
            log_level=_get_log_level(env, "MATCHSCORE_LOG_LEVEL", "INFO"),
        )
