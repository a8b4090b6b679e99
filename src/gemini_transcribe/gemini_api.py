"""
Wrapper for the Gemini ``generateContent`` endpoint.

The audio is embedded in the request as base64 ``inline_data`` followed
by a text part holding the instruction prompt.  Like the rest of the
package this talks to the REST API with ``requests`` rather than pulling
in the official Google client.

Request shape::

    {"contents": [{"parts": [
        {"inline_data": {"mime_type": "audio/mpeg", "data": "<base64>"}},
        {"text": "Transcribe this audio accurately. ..."}
    ]}]}

The transcription is the text of the first part of the first candidate.
An ``error`` object in the response body is passed through verbatim.
"""

from __future__ import annotations

import base64
import json
from typing import Any

import requests

API_URL_TEMPLATE = "{base_url}/v1beta/models/{model}:generateContent?key={api_key}"

# Inline uploads of large video can take a while to process.
DEFAULT_TIMEOUT = 600


class GeminiError(RuntimeError):
    """Raised when the API call fails or the response carries no text."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)


def build_request(audio: bytes, mime_type: str, prompt: str) -> dict[str, Any]:
    return {
        "contents": [
            {
                "parts": [
                    {
                        "inline_data": {
                            "mime_type": mime_type,
                            "data": base64.b64encode(audio).decode("ascii"),
                        }
                    },
                    {"text": prompt},
                ]
            }
        ]
    }


def build_url(base_url: str, model: str, api_key: str) -> str:
    return API_URL_TEMPLATE.format(base_url=base_url, model=model, api_key=api_key)


def _first(items: Any) -> Any:
    if isinstance(items, list) and items:
        return items[0]
    return None


def _first_part(payload: Any) -> dict[str, Any] | None:
    """Return the first part of the first candidate if every level is well formed."""
    if not isinstance(payload, dict):
        return None
    candidate = _first(payload.get("candidates"))
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    if not isinstance(content, dict):
        return None
    part = _first(content.get("parts"))
    return part if isinstance(part, dict) else None


def parse_response(status_code: int, body: str) -> str:
    """Extract the transcription from a raw ``generateContent`` response.

    Raises
    ------
    GeminiError
        If the body is not JSON, carries an ``error`` object, signals an
        HTTP failure, or holds no candidate text.
    """
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise GeminiError(f"failed to parse response: {exc}\nBody: {body}") from exc

    if isinstance(payload, dict) and payload.get("error"):
        error = payload["error"]
        if isinstance(error, dict):
            code = error.get("code", status_code)
            message = error.get("message", "")
        else:
            code, message = status_code, str(error)
        raise GeminiError(f"API error ({code}): {message}", code=code)

    if status_code >= 300:
        raise GeminiError(f"API error ({status_code}): {body}", code=status_code)

    part = _first_part(payload)
    if part is None:
        raise GeminiError("no transcription in response")
    text = part.get("text")
    return text.strip() if isinstance(text, str) else ""


def transcribe(
    audio: bytes,
    mime_type: str,
    *,
    api_key: str,
    model: str,
    base_url: str,
    prompt: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Send ``audio`` to Gemini and return the transcription text.

    Parameters
    ----------
    audio : bytes
        Raw file contents.  Encoded to base64 here.
    mime_type : str
        MIME type of ``audio``, e.g. ``audio/mpeg``.
    api_key : str
        The Gemini API key, sent as the ``key`` query parameter.
    model : str
        Model name such as ``gemini-2.5-flash``.
    base_url : str
        API root without a trailing slash.  Lets the tool go through a
        proxy.
    prompt : str
        Instruction sent alongside the audio.
    timeout : float
        Seconds to wait for the response.

    Raises
    ------
    GeminiError
        For network failures and any response :func:`parse_response`
        rejects.
    """
    url = build_url(base_url, model, api_key)
    try:
        resp = requests.post(
            url,
            json=build_request(audio, mime_type, prompt),
            timeout=timeout,
        )
    except requests.RequestException as exc:
        # The URL carries the key; report the exception type and host only.
        raise GeminiError(f"request to {base_url} failed: {type(exc).__name__}") from exc

    return parse_response(resp.status_code, resp.text)
