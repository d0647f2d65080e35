from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent
load_dotenv(PROJECT_ROOT / ".env", override=False)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_BIND_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_MAX_ROUNDS = 3
DEFAULT_MAX_INVALID_GUESSES = 3
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(ValueError):
    """Raised when an environment setting cannot be used."""


@dataclass(frozen=True)
class GameConfig:
    host: str = DEFAULT_HOST
    bind_host: str = DEFAULT_BIND_HOST
    port: int = DEFAULT_PORT
    max_rounds: int = DEFAULT_MAX_ROUNDS
    turn_timeout: Optional[float] = None
    max_invalid_guesses: int = DEFAULT_MAX_INVALID_GUESSES
    log_level: str = DEFAULT_LOG_LEVEL


def _read_int(name: str, default: int, minimum: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _read_timeout(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_config() -> GameConfig:
    """Build a `GameConfig` from the environment (and the project `.env`)."""
    return GameConfig(
        host=(os.getenv("GAME_HOST") or DEFAULT_HOST).strip(),
        bind_host=(os.getenv("GAME_BIND_HOST") or DEFAULT_BIND_HOST).strip(),
        port=_read_int("GAME_PORT", DEFAULT_PORT, 0),
        max_rounds=_read_int("GAME_MAX_ROUNDS", DEFAULT_MAX_ROUNDS, 1),
        turn_timeout=_read_timeout("GAME_TURN_TIMEOUT"),
        max_invalid_guesses=_read_int(
            "GAME_MAX_INVALID_GUESSES", DEFAULT_MAX_INVALID_GUESSES, 1
        ),
        log_level=(os.getenv("GAME_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper(),
    )
