# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the stream helpers unit so this responsibility stays isolated, testable, and easy to evolve.

Utility functions for handling server-sent events (SSE): decoding the
upstream completion stream line by line and encoding events for the browser.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from streamchat.services.chat.validator import classify_status
from streamchat.services.exceptions import RequestError, StreamParseError

DONE_SENTINEL = "[DONE]"


@dataclass(frozen=True)
class StreamDelta:
    """Decoded content of one upstream SSE line."""

    content: str = ""
    finished: bool = False


IGNORED = StreamDelta()
DONE = StreamDelta(finished=True)


def parse_sse_line(line: str) -> StreamDelta:
    """Decode one line of an OpenAI-compatible completion stream.

    Blank lines, comments (``: keep-alive``) and non-data fields are ignored.
    ``data: [DONE]`` and any choice carrying a ``finish_reason`` terminate the
    stream.
    """
    line = line.rstrip("\r\n")
    if not line.strip() or line.startswith(":"):
        return IGNORED
    if not line.startswith("data:"):
        # event:, id:, retry: fields carry nothing we render
        return IGNORED

    data_str = line[5:].strip()
    if data_str == DONE_SENTINEL:
        return DONE
    if not data_str:
        return IGNORED

    try:
        chunk = json.loads(data_str)
    except json.JSONDecodeError:
        raise StreamParseError("Malformed stream data") from None
    if not isinstance(chunk, dict):
        raise StreamParseError("Malformed stream data")
    return parse_chunk(chunk)


def parse_chunk(chunk: Dict[str, Any]) -> StreamDelta:
    if chunk.get("error"):
        err = chunk["error"]
        code = err.get("code") if isinstance(err, dict) else None
        if not isinstance(code, int):
            code = None
        error_cls = classify_status(code) if code is not None else RequestError
        raise error_cls("Upstream reported an error", upstream_status=code)

    choices = chunk.get("choices")
    if not isinstance(choices, list) or not choices:
        return IGNORED
    choice = choices[0]
    if not isinstance(choice, dict):
        raise StreamParseError("Malformed stream data")

    delta = choice.get("delta") or choice.get("message") or {}
    if not isinstance(delta, dict):
        raise StreamParseError("Malformed stream data")
    content = delta.get("content") or ""
    if not isinstance(content, str):
        raise StreamParseError("Malformed stream data")
    return StreamDelta(content=content, finished=choice.get("finish_reason") is not None)


def parse_complete_response(data: Any) -> str:
    """Extract the assistant text from a non-streamed JSON completion."""
    if not isinstance(data, dict):
        raise StreamParseError("Malformed response body")
    delta = parse_chunk(data)
    return delta.content


def format_sse(payload: Dict[str, Any], event: Optional[str] = None) -> str:
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {json.dumps(payload)}\n\n"
