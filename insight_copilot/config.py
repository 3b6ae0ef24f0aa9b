"""Runtime settings read from the environment (and a local .env file)."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

__all__ = ["Settings", "load_settings"]

DEFAULT_MODEL = "gemini-1.5-flash"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    model_name: str = DEFAULT_MODEL
    temperature: float = 0.4
    max_output_tokens: int = 2048
    request_timeout: float = 60.0
    history_dir: Path = Path(".chat_history")
    log_dir: Path = Path("logs")
    log_level: int = logging.INFO


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> Settings:
    """Load .env if present, then build Settings from os.environ.

    The API key is never read from source; GOOGLE_API_KEY is accepted as a
    fallback for GEMINI_API_KEY.
    """
    load_dotenv()
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown LOG_LEVEL: {level_name}")
    return Settings(
        api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY"),
        model_name=os.environ.get("MODEL_NAME") or DEFAULT_MODEL,
        temperature=_env_float("TEMPERATURE", 0.4),
        max_output_tokens=int(_env_float("MAX_OUTPUT_TOKENS", 2048)),
        request_timeout=_env_float("REQUEST_TIMEOUT", 60.0),
        history_dir=Path(os.environ.get("HISTORY_DIR") or ".chat_history"),
        log_dir=Path(os.environ.get("LOG_DIR") or "logs"),
        log_level=level,
    )
