from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    tailor_rate_limit: str
    cors_allowed_origins: tuple[str, ...]
    scoring_config_path: str | None
    lexicon_path: str | None
    rewrite_llm_enabled: bool
    rewrite_timeout_s: float
    rewrite_max_input_chars: int
    rewrite_min_output_chars: int


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    tailor_rate_limit=_get_env("TAILOR_RATE_LIMIT", "10/minute") or "10/minute",
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    scoring_config_path=_get_env("SCORING_CONFIG_PATH"),
    lexicon_path=_get_env("LEXICON_PATH"),
    rewrite_llm_enabled=_get_env_bool("REWRITE_LLM_ENABLED", True),
    rewrite_timeout_s=_get_env_float("REWRITE_TIMEOUT_S", 8.0),
    rewrite_max_input_chars=_get_env_int("REWRITE_MAX_INPUT_CHARS", 3000),
    rewrite_min_output_chars=_get_env_int("REWRITE_MIN_OUTPUT_CHARS", 50),
)

if settings.rewrite_timeout_s <= 0:
    raise RuntimeError("REWRITE_TIMEOUT_S must be greater than 0.")
