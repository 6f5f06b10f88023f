"""Environment-driven defaults for the wav-files-tempo CLI."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class Settings:
    workers: int
    log_level: str
    log_file: Optional[str]


def load_settings(dotenv: bool = True) -> Settings:
    """Read WAV_TEMPO_* variables (after .env, unless dotenv=False)."""
    if dotenv:
        load_dotenv()
    return Settings(
        workers=max(1, _env_int("WAV_TEMPO_WORKERS", 1)),
        log_level=(_env_str("WAV_TEMPO_LOG_LEVEL", "INFO") or "INFO").upper(),
        log_file=_env_str("WAV_TEMPO_LOG_FILE", None),
    )
