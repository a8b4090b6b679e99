# src/gemini_transcribe/config.py
from __future__ import annotations

import os
from pathlib import Path

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_PROMPT = (
    "Transcribe this audio accurately. "
    "Output only the transcription, no extra commentary."
)

API_KEY_ENV = "GEMINI_API_KEY"
BASE_URL_ENV = "GEMINI_BASE_URL"


def api_key_file() -> Path:
    return Path.home() / ".config" / "gemini" / "api_key"


def read_api_key_file(path: Path | None = None) -> str | None:
    """Return the stripped key stored in ``path``, or ``None`` if unusable."""
    path = path or api_key_file()
    try:
        key = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None
    return key or None


def resolve_api_key(flag_value: str | None = None) -> str | None:
    """Pick the API key from the flag, the environment, then the key file."""
    if flag_value:
        return flag_value
    env_value = os.getenv(API_KEY_ENV)
    if env_value:
        return env_value
    return read_api_key_file()


def resolve_base_url(flag_value: str | None = None) -> str:
    base_url = flag_value or os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL
    return base_url.removesuffix("/")
