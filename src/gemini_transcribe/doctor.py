"""
Diagnostics and environment checks for gemini-transcribe.

This module powers the `gemini-transcribe doctor` command. It checks:
- Python version
- ffmpeg availability (optional; without it files are sent unconverted)
- Gemini API key (environment variable or key file)
"""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass

from .config import API_KEY_ENV, api_key_file, read_api_key_file


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    name: str
    message: str
    fix: str | None = None
    required: bool = True


def check_python_version(min_major: int = 3, min_minor: int = 9) -> CheckResult:
    major, minor = sys.version_info[:2]
    if (major, minor) < (min_major, min_minor):
        return CheckResult(
            ok=False,
            name="python",
            message=f"Python {major}.{minor} is too old (need {min_major}.{min_minor}+)",
            fix=f"Install Python {min_major}.{min_minor}+ and recreate your venv",
        )
    return CheckResult(ok=True, name="python", message=f"Python {major}.{minor} OK")


def check_ffmpeg() -> CheckResult:
    if shutil.which("ffmpeg") is None:
        return CheckResult(
            ok=False,
            name="ffmpeg",
            message="ffmpeg not found on PATH; video and large files will be sent unconverted",
            fix="Install ffmpeg (macOS: brew install ffmpeg | Ubuntu: sudo apt-get install ffmpeg | Windows: choco install ffmpeg)",
            required=False,
        )
    return CheckResult(ok=True, name="ffmpeg", message="ffmpeg found", required=False)


def check_api_key() -> CheckResult:
    if os.getenv(API_KEY_ENV):
        return CheckResult(ok=True, name="api key", message=f"{API_KEY_ENV} set")
    if read_api_key_file():
        return CheckResult(ok=True, name="api key", message=f"read from {api_key_file()}")
    return CheckResult(
        ok=False,
        name="api key",
        message="API key missing",
        fix=f'export {API_KEY_ENV}="..." or store it in {api_key_file()} (or pass -k)',
    )


def run_checks() -> list[CheckResult]:
    return [
        check_python_version(),
        check_ffmpeg(),
        check_api_key(),
    ]


def format_report() -> tuple[bool, list[str]]:
    """
    Returns (overall_ok, lines) for printing in CLI.

    Optional checks are reported but never fail the overall result.
    """
    results = run_checks()
    overall_ok = all(r.ok for r in results if r.required)

    lines: list[str] = []
    for r in results:
        if r.ok:
            status = "✓"
        else:
            status = "✗" if r.required else "!"
        line = f"{status} {r.name}: {r.message}"
        if (not r.ok) and r.fix:
            line += f" (fix: {r.fix})"
        lines.append(line)

    return overall_ok, lines
