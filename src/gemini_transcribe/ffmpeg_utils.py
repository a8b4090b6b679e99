"""
Utilities for preparing media with the ``ffmpeg`` command line tool.

Gemini accepts common audio formats inline, so small audio files are
sent untouched.  Everything else (video containers, large audio) is
reduced to a mono 16 kHz mp3 at 64 kbps, which is plenty for speech and
keeps the inline payload small.  When ``ffmpeg`` is not installed the
file is read as-is and the API is left to cope with it.

The helpers exposed here:

* :func:`ffmpeg_available` reports whether ``ffmpeg`` is on ``PATH``.
* :func:`mime_for_path` maps a file extension to the MIME type sent
  with the inline data.
* :func:`convert_to_mp3` shells out to ``ffmpeg``.
* :func:`prepare_audio` decides between the two and returns the bytes
  to upload together with their MIME type.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

# Files at or above this size are re-encoded even if the format is fine.
MAX_DIRECT_BYTES = 20 * 1024 * 1024

# Audio formats that Gemini accepts well without conversion.
DIRECT_AUDIO_EXTS = frozenset({".mp3", ".wav", ".ogg", ".flac", ".m4a", ".aac"})

_MIME_BY_EXT: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
}


class FFmpegError(RuntimeError):
    """Raised when ``ffmpeg`` exits with a non-zero status."""

    def __init__(self, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"ffmpeg failed (exit status {returncode})\n{stderr}".rstrip())


def ffmpeg_available() -> bool:
    return shutil.which("ffmpeg") is not None


def mime_for_path(path: Path) -> str:
    """Return the MIME type for ``path`` based on its extension."""
    return _MIME_BY_EXT.get(path.suffix.lower(), "application/octet-stream")


def convert_to_mp3(input_path: Path, *, temp_dir: Path | None = None) -> Path:
    """Extract the audio track of ``input_path`` as a mono 16 kHz mp3.

    The output is written to ``temp_dir`` (created if needed) or to a
    fresh temporary directory.  The caller owns the returned file and
    its directory.

    Raises
    ------
    FFmpegError
        If ``ffmpeg`` fails.  The exception carries ffmpeg's stderr.
    """
    workdir = temp_dir or Path(tempfile.mkdtemp(prefix="gemini-transcribe-"))
    workdir.mkdir(parents=True, exist_ok=True)
    mp3_path = workdir / "audio.mp3"

    cmd = [
        "ffmpeg",
        "-i",
        str(input_path),
        "-vn",
        "-acodec",
        "libmp3lame",
        "-ar",
        "16000",
        "-ac",
        "1",
        "-b:a",
        "64k",
        "-y",
        str(mp3_path),
    ]
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as exc:
        raise FFmpegError(exc.returncode, exc.stderr or "") from exc
    return mp3_path


def _can_send_directly(input_path: Path) -> bool:
    if input_path.suffix.lower() not in DIRECT_AUDIO_EXTS:
        return False
    try:
        return input_path.stat().st_size < MAX_DIRECT_BYTES
    except OSError:
        return False


def prepare_audio(input_path: Path, *, verbose: bool = False) -> tuple[bytes, str]:
    """Return ``(data, mime_type)`` ready to be sent inline to Gemini.

    Without ``ffmpeg`` the file is read unchanged.  With ``ffmpeg``,
    small files in a well supported audio format are also read
    unchanged; anything else is converted to mp3 in a temporary
    directory which is removed before returning.
    """
    if not ffmpeg_available():
        if verbose:
            print("ffmpeg not found, reading file directly...", file=sys.stderr)
        return input_path.read_bytes(), mime_for_path(input_path)

    if _can_send_directly(input_path):
        if verbose:
            print("Sending file directly...", file=sys.stderr)
        return input_path.read_bytes(), mime_for_path(input_path)

    if verbose:
        print("Converting to mp3 with ffmpeg...", file=sys.stderr)
    with tempfile.TemporaryDirectory(prefix="gemini-transcribe-") as tmp:
        mp3_path = convert_to_mp3(input_path, temp_dir=Path(tmp))
        data = mp3_path.read_bytes()
    return data, "audio/mpeg"
