# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm stream ops unit so this responsibility stays isolated, testable, and easy to evolve.

Streaming client for an OpenAI-compatible ``/chat/completions`` endpoint.
Fragments are yielded as soon as each SSE line is decoded; the assistant reply
is committed to the session only after the terminal marker arrives.
"""

from __future__ import annotations

import json as _json
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict

import httpx

from streamchat.core.config import DEFAULT_ENDPOINT
from streamchat.models.chat import ChatMessage, StreamRequest
from streamchat.services.chat.session_state import SessionState
from streamchat.services.chat.validator import classify_status, sanitize_error
from streamchat.services.exceptions import ChatStreamError, StreamParseError
from streamchat.services.llm.llm_logging import (
    add_llm_log,
    create_log_entry,
    finish_log_entry,
    record_error,
    record_fragment,
)
from streamchat.services.llm.llm_request_helpers import (
    build_headers,
    build_timeout,
    validate_endpoint,
)
from streamchat.utils.stream_helpers import (
    DONE,
    parse_complete_response,
    parse_sse_line,
)


async def _iter_fragments(
    *,
    url: str,
    request: StreamRequest,
    body: Dict[str, Any],
    timeout_s: int,
    transport: httpx.AsyncBaseTransport | None,
    log_entry: Dict[str, Any],
) -> AsyncIterator[str]:
    """Yield text fragments in transport order; raise on any failure."""
    async with httpx.AsyncClient(
        timeout=build_timeout(timeout_s), verify=True, transport=transport
    ) as client:
        async with client.stream(
            "POST", url, headers=build_headers(request.api_key), json=body
        ) as resp:
            log_entry["response"]["status_code"] = resp.status_code

            if resp.status_code >= 400:
                raise classify_status(resp.status_code)(
                    "Upstream error", upstream_status=resp.status_code
                )

            content_type = resp.headers.get("content-type", "")
            if (
                "text/event-stream" not in content_type
                and "application/json" in content_type
            ):
                raw = await resp.aread()
                try:
                    data = _json.loads(raw)
                except ValueError:
                    raise StreamParseError("Malformed response body") from None
                text = parse_complete_response(data)
                if text:
                    record_fragment(log_entry, text)
                    yield text
                return

            finished = False
            async for line in resp.aiter_lines():
                delta = parse_sse_line(line)
                if delta.content:
                    record_fragment(log_entry, delta.content)
                    yield delta.content
                if delta.finished:
                    finished = True
                    if delta is DONE:
                        break

            if not finished:
                raise StreamParseError("Stream ended before completion")


async def stream_completion(
    model: str,
    api_key: str,
    session: SessionState,
    *,
    endpoint: str = DEFAULT_ENDPOINT,
    timeout_s: int = 60,
    temperature: float | None = None,
    max_tokens: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[str]:
    """Stream one assistant reply for the session's current history.

    ``model`` must already be validated. Non-https endpoints are rejected
    before anything is sent. Any upstream failure surfaces as a
    ``ChatStreamError`` holding only a sanitized message; the session is left
    untouched in that case and when the caller stops iterating early.
    """
    url = validate_endpoint(endpoint)
    request = StreamRequest(model=model, api_key=api_key, messages=session.snapshot())
    body = request.to_body(temperature=temperature, max_tokens=max_tokens)

    # Logged headers are built without the key.
    log_entry = create_log_entry(url, "POST", build_headers(""), body, streaming=True)
    add_llm_log(log_entry)

    parts: list[str] = []
    completed = False
    failure: str | None = None
    try:
        async with aclosing(
            _iter_fragments(
                url=url,
                request=request,
                body=body,
                timeout_s=timeout_s,
                transport=transport,
                log_entry=log_entry,
            )
        ) as fragments:
            async for fragment in fragments:
                parts.append(fragment)
                yield fragment
        if not parts:
            raise StreamParseError("Upstream returned an empty reply")
        completed = True
    except Exception as exc:
        record_error(log_entry, exc)
        failure = sanitize_error(exc)
    finally:
        finish_log_entry(log_entry, completed)

    # Raised outside the handler so no upstream detail rides along as context.
    if failure is not None:
        raise ChatStreamError(failure)

    session.append(ChatMessage(role="assistant", content="".join(parts)))
