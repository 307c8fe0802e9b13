# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the chat unit so this responsibility stays isolated, testable, and easy to evolve.

API endpoints for chat sessions and streamed conversations with the selected model.
"""

from contextlib import aclosing
from typing import AsyncIterator

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse

from streamchat.api.v1.http_responses import event_stream, ok_json
from streamchat.models.chat import (
    ChatInitialStateResponse,
    ChatStreamRequestBody,
    SessionMessagesResponse,
)
from streamchat.services.chat.chat_service import ChatService
from streamchat.services.chat.validator import DEFAULT_MODEL, list_models
from streamchat.services.exceptions import ChatStreamError, NotFoundError
from streamchat.utils.stream_helpers import format_sse

router = APIRouter(tags=["Chat"])


def _chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


@router.get("/chat", response_model=ChatInitialStateResponse)
async def api_get_chat(request: Request) -> ChatInitialStateResponse:
    """Return initial state for chat view: models, default selection and history cap."""
    return ChatInitialStateResponse(
        models=list_models(),
        current_model=DEFAULT_MODEL,
        history_limit=_chat_service(request).sessions.history_limit,
    )


@router.post("/sessions")
async def api_create_session(request: Request) -> JSONResponse:
    session_id = _chat_service(request).sessions.create()
    return ok_json(status_code=201, session_id=session_id)


@router.get("/sessions/{session_id}/messages", response_model=SessionMessagesResponse)
async def api_session_messages(
    session_id: str, request: Request
) -> SessionMessagesResponse:
    state = _chat_service(request).sessions.get(session_id)
    return SessionMessagesResponse(messages=list(state.snapshot()))


@router.delete("/sessions/{session_id}")
async def api_end_session(session_id: str, request: Request) -> JSONResponse:
    """End a session. Its history is discarded; nothing is written anywhere."""
    if not _chat_service(request).sessions.drop(session_id):
        raise NotFoundError("Unknown session")
    return ok_json()


@router.post("/sessions/{session_id}/stream")
async def api_chat_stream(
    session_id: str, body: ChatStreamRequestBody, request: Request
) -> StreamingResponse:
    """Stream one assistant reply as server-sent events.

    Events:
      data: {"content": str}   one per fragment, in arrival order
      data: {"done": true}     reply committed to the session
      data: {"error": str}     sanitized failure; nothing was committed

    Invalid models, empty prompts, missing keys and unknown sessions are
    rejected with a JSON error before the stream opens.
    """
    fragments = _chat_service(request).submit(
        session_id, body.model, body.api_key, body.prompt
    )

    async def _gen() -> AsyncIterator[str]:
        async with aclosing(fragments) as stream:
            try:
                async for fragment in stream:
                    yield format_sse({"content": fragment})
            except ChatStreamError as exc:
                yield format_sse({"error": exc.detail})
                return
        yield format_sse({"done": True})

    return event_stream(_gen())
