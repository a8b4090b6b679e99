from __future__ import annotations

from pathlib import Path

from gemini_transcribe.config import (
    DEFAULT_BASE_URL,
    api_key_file,
    resolve_api_key,
    resolve_base_url,
)


def _write_key_file(contents: str) -> Path:
    path = api_key_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    return path


def test_flag_wins_over_env_and_file(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    _write_key_file("from-file\n")
    assert resolve_api_key("from-flag") == "from-flag"


def test_env_wins_over_file(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    _write_key_file("from-file\n")
    assert resolve_api_key(None) == "from-env"


def test_key_file_is_stripped():
    _write_key_file("  from-file \n")
    assert resolve_api_key(None) == "from-file"


def test_missing_key_returns_none():
    assert resolve_api_key(None) is None


def test_blank_key_file_counts_as_missing():
    _write_key_file("\n")
    assert resolve_api_key("") is None


def test_undecodable_key_file_counts_as_missing():
    path = api_key_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\xff\xfekey\n")
    assert resolve_api_key(None) is None


def test_unreadable_key_path_counts_as_missing():
    # a directory where the key file should be
    api_key_file().mkdir(parents=True)
    assert resolve_api_key(None) is None


def test_base_url_default():
    assert resolve_base_url(None) == DEFAULT_BASE_URL


def test_base_url_env_and_trailing_slash(monkeypatch):
    monkeypatch.setenv("GEMINI_BASE_URL", "https://proxy.example.dev/")
    assert resolve_base_url(None) == "https://proxy.example.dev"


def test_base_url_flag_wins(monkeypatch):
    monkeypatch.setenv("GEMINI_BASE_URL", "https://env.example.dev")
    assert resolve_base_url("https://flag.example.dev/") == "https://flag.example.dev"
