"""
Purpose: Runtime settings read from the environment (a `.env` file at the
repo root is loaded first).
Why: one place for tunables (log level, response clipping, per-question
duration, RNG seed) and the OpenAI speech models used by voice mode.

Testing: build `Settings(...)` directly; `load_settings()` only reads env.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def ensure_env_loaded() -> None:
    project_root = Path(__file__).resolve().parents[2]
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
    else:
        load_dotenv(override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_json: bool = False
    max_response_chars: int = 10000
    average_question_seconds: int = 180
    random_seed: Optional[int] = None
    openai_api_key: Optional[str] = None
    stt_model: str = "whisper-1"
    tts_model: str = "gpt-4o-mini-tts"
    tts_voice: str = "alloy"

    @property
    def voice_enabled(self) -> bool:
        return bool(self.openai_api_key)


def load_settings() -> Settings:
    ensure_env_loaded()
    return Settings(
        log_level=os.getenv("INTERVIEW_LOG_LEVEL", "INFO"),
        log_json=_env_bool("INTERVIEW_LOG_JSON"),
        max_response_chars=_env_int("INTERVIEW_MAX_RESPONSE_CHARS", 10000),
        average_question_seconds=_env_int("INTERVIEW_AVERAGE_QUESTION_SECONDS", 180),
        random_seed=_env_int("INTERVIEW_RANDOM_SEED", None),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        stt_model=os.getenv("OPENAI_STT_MODEL", "whisper-1"),
        tts_model=os.getenv("OPENAI_TTS_MODEL", "gpt-4o-mini-tts"),
        tts_voice=os.getenv("OPENAI_TTS_VOICE", "alloy"),
    )
