# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the chat unit so this responsibility stays isolated, testable, and easy to evolve.

Pydantic models for chat messages, upstream requests and chat API bodies.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ChatMessage(BaseModel):
    """One turn of a conversation. Frozen once created."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime.datetime = Field(default_factory=_utcnow)

    def to_upstream(self) -> dict[str, str]:
        """Role/content pair as sent in the completions request body."""
        return {"role": self.role, "content": self.content}


class StreamRequest(BaseModel):
    """Per-call upstream request. The api key is excluded from dumps and repr."""

    model_config = ConfigDict(frozen=True)

    model: str
    api_key: str = Field(exclude=True, repr=False)
    messages: tuple[ChatMessage, ...]

    def to_body(
        self, *, temperature: float | None = None, max_tokens: int | None = None
    ) -> dict:
        body: dict = {
            "model": self.model,
            "messages": [m.to_upstream() for m in self.messages],
            "stream": True,
        }
        if temperature is not None:
            body["temperature"] = temperature
        if isinstance(max_tokens, int):
            body["max_tokens"] = max_tokens
        return body


class ChatInitialStateResponse(BaseModel):
    """Response body for ``GET /api/v1/chat``.

    Returns the allowed models and the history cap so the frontend can
    initialise the chat panel without a separate request.
    """

    models: list[str]
    current_model: str
    history_limit: int


class ChatStreamRequestBody(BaseModel):
    """Body of ``POST /api/v1/sessions/{session_id}/stream``."""

    model: str
    api_key: str = Field(repr=False)
    prompt: str


class SessionMessagesResponse(BaseModel):
    messages: list[ChatMessage]
