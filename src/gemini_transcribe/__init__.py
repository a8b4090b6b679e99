"""gemini_transcribe

This module exposes a command-line interface for transcribing audio and
video files with Google's Gemini API.  The file is sent inline (base64)
with a short instruction prompt to the ``generateContent`` endpoint and
the model's reply is printed.  When ``ffmpeg`` is available, video and
large audio files are first reduced to a small mono mp3.

Usage as a library is not the primary goal; use the ``gemini-transcribe``
CLI installed by this package.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
