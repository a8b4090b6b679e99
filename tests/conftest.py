"""
Configure the test environment to locate the package under ``src``.

pytest automatically imports this module before running tests.  Here we
insert the ``src`` directory into ``sys.path`` so that ``import
gemini_transcribe`` in tests resolves to the local source tree without
needing to install the package first.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_SRC = (Path(__file__).resolve().parents[1] / "src").as_posix()
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path) -> None:
    """Keep the developer's real key, base URL and home out of the tests."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_BASE_URL", raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
