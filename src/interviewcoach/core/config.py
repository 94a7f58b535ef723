"""Runtime settings read from the environment.

A ``.env`` file in the working directory is loaded first so local runs can
keep the OpenAI key out of the shell profile.  Values already present in the
environment win over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_ENV_PREFIX = "INTERVIEWCOACH_"


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    try:
        return int(_env(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    chat_model: str = "gpt-4o-mini"
    stt_model: str = "whisper-1"
    tts_model: str = "gpt-4o-mini-tts"
    tts_voice: str = "nova"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


def load_settings(*, dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv(override=False)
    return Settings(
        openai_api_key=_env("OPENAI_API_KEY", ""),
        chat_model=_env(f"{_ENV_PREFIX}CHAT_MODEL", Settings.chat_model),
        stt_model=_env(f"{_ENV_PREFIX}STT_MODEL", Settings.stt_model),
        tts_model=_env(f"{_ENV_PREFIX}TTS_MODEL", Settings.tts_model),
        tts_voice=_env(f"{_ENV_PREFIX}TTS_VOICE", Settings.tts_voice),
        host=_env("BIND", Settings.host),
        port=_env_int("PORT", Settings.port),
        log_level=_env(f"{_ENV_PREFIX}LOG_LEVEL", Settings.log_level).upper(),
    )
