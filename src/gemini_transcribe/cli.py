"""
CLI entry point for the gemini_transcribe package.

The ``gemini-transcribe`` command wraps a handful of steps into a single
interface:

* Resolve the API key from ``-k``, ``GEMINI_API_KEY`` or
  ``~/.config/gemini/api_key`` and the API root from ``-b``,
  ``GEMINI_BASE_URL`` or the public endpoint.
* Prepare the input.  Small audio files are sent as they are; video and
  large audio are converted to a speech-grade mp3 with ``ffmpeg`` when
  it is installed.
* Send the audio inline to Gemini and print the transcription, either
  as plain text or as JSON with ``--json``.

Use the ``--help`` flag to see all available options.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import NoReturn

from . import __version__
from .config import (
    API_KEY_ENV,
    BASE_URL_ENV,
    DEFAULT_MODEL,
    DEFAULT_PROMPT,
    api_key_file,
    resolve_api_key,
    resolve_base_url,
)
from .ffmpeg_utils import FFmpegError, prepare_audio
from .gemini_api import DEFAULT_TIMEOUT, GeminiError, transcribe

SUBCOMMANDS = {"doctor", "transcribe"}

_EPILOG = """\
examples:
  gemini-transcribe -i audio.mp3
  gemini-transcribe -i video.mp4 -m gemini-2.5-flash
  gemini-transcribe -i recording.wav --json
  gemini-transcribe -i audio.ogg -b https://gemini-proxy.example.workers.dev

supported formats: mp3, wav, ogg, flac, m4a, aac, mp4, webm, mov, avi, mkv
"""


def positive_float(value: str) -> float:
    """argparse type for strictly positive numbers such as timeouts."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemini-transcribe",
        description="Transcribe audio/video using the Gemini API.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    # ---- doctor subcommand
    subparsers.add_parser(
        "doctor",
        help="Check environment and dependencies",
        description="Verify Python version, ffmpeg and API key configuration.",
    )

    # ---- transcribe subcommand (default)
    transcribe_parser = subparsers.add_parser(
        "transcribe",
        help="Transcribe audio/video",
        description="Transcribe a file with Gemini and print the result.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    transcribe_parser.add_argument(
        "-i",
        "--input",
        required=True,
        help="Input audio/video file.",
    )
    transcribe_parser.add_argument(
        "-k",
        "--key",
        default=None,
        help=f"Gemini API key (or set {API_KEY_ENV}, or store in ~/.config/gemini/api_key).",
    )
    transcribe_parser.add_argument(
        "-m", "--model", default=DEFAULT_MODEL, help="Gemini model to use."
    )
    transcribe_parser.add_argument(
        "-b",
        "--base-url",
        default=None,
        help=f"Custom API base URL (or set {BASE_URL_ENV}).",
    )
    transcribe_parser.add_argument(
        "-p", "--prompt", default=DEFAULT_PROMPT, help="Custom prompt."
    )
    transcribe_parser.add_argument(
        "--json",
        dest="output_json",
        action="store_true",
        help="Output as JSON (transcription, model, file).",
    )
    transcribe_parser.add_argument(
        "-o", "--out", default=None, help="Also write the output to this path."
    )
    transcribe_parser.add_argument(
        "--timeout",
        type=positive_float,
        default=DEFAULT_TIMEOUT,
        help=f"HTTP timeout in seconds (default {DEFAULT_TIMEOUT}).",
    )
    transcribe_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output on stderr."
    )

    return parser


def format_output(transcription: str, *, model: str, input_file: str, as_json: bool) -> str:
    if as_json:
        result = {
            "transcription": transcription,
            "model": model,
            "file": input_file,
        }
        return json.dumps(result, ensure_ascii=False, indent=2)
    return transcription


def _fail(message: str) -> NoReturn:
    print(f"ERROR: {message}", file=sys.stderr)
    sys.exit(1)


def run_transcribe(args: argparse.Namespace) -> None:
    api_key = resolve_api_key(args.key)
    if not api_key:
        _fail(
            f"API key required. Use -k flag, set {API_KEY_ENV}, or store in {api_key_file()}"
        )
    base_url = resolve_base_url(args.base_url)

    in_path = Path(args.input).expanduser()
    if not in_path.is_file():
        _fail(f"file not found: {args.input}")

    try:
        audio, mime_type = prepare_audio(in_path, verbose=args.verbose)
    except (FFmpegError, OSError) as exc:
        _fail(f"preparing audio: {exc}")

    if args.verbose:
        print(f"Audio size: {len(audio)} bytes, MIME: {mime_type}", file=sys.stderr)
        print(f"Sending to Gemini ({args.model})...", file=sys.stderr)

    try:
        transcription = transcribe(
            audio,
            mime_type,
            api_key=api_key,
            model=args.model,
            base_url=base_url,
            prompt=args.prompt,
            timeout=args.timeout,
        )
    except GeminiError as exc:
        _fail(f"transcribing: {exc}")

    output = format_output(
        transcription,
        model=args.model,
        input_file=args.input,
        as_json=args.output_json,
    )
    print(output)

    if args.out:
        out_path = Path(args.out).expanduser()
        try:
            out_path.write_text(output + "\n", encoding="utf-8")
        except OSError as exc:
            _fail(f"writing {out_path}: {exc}")
        if args.verbose:
            print(f"OK -> {out_path}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """Run the command line interface.

    Errors are written to stderr and result in a nonzero exit status.
    """
    parser = build_parser()

    # If no subcommand is given, inject "transcribe" so
    # `gemini-transcribe -i file.mp3` works as expected.
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] not in SUBCOMMANDS | {"-h", "--help", "--version"}:
        argv = ["transcribe"] + argv

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(1)

    if args.command == "doctor":
        from .doctor import format_report

        ok, lines = format_report()
        for line in lines:
            print(line)
        raise SystemExit(0 if ok else 1)

    run_transcribe(args)
    sys.exit(0)


if __name__ == "__main__":  # pragma: no cover
    main()
