# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the chat service unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict

import httpx

from streamchat.models.chat import ChatMessage
from streamchat.services.chat.session_state import SessionRegistry
from streamchat.services.chat.validator import validate_model
from streamchat.services.exceptions import BadRequestError
from streamchat.services.llm.llm_request_helpers import validate_endpoint
from streamchat.services.llm.llm_stream_ops import stream_completion


class ChatService:
    """Turns one user submission into a fragment stream bound to its session."""

    def __init__(
        self,
        sessions: SessionRegistry,
        *,
        endpoint: str,
        timeout_s: int = 60,
        temperature: float | None = None,
        max_tokens: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sessions = sessions
        self.endpoint = validate_endpoint(endpoint)
        self.timeout_s = timeout_s
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.transport = transport

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], sessions: SessionRegistry | None = None
    ) -> "ChatService":
        llm_cfg = config.get("llm") or {}
        if sessions is None:
            sessions = SessionRegistry(config["session"]["history_limit"])
        return cls(
            sessions,
            endpoint=llm_cfg["endpoint"],
            timeout_s=llm_cfg.get("timeout_s", 60),
            temperature=llm_cfg.get("temperature"),
            max_tokens=llm_cfg.get("max_tokens"),
        )

    def submit(
        self, session_id: str, model: str, api_key: str, prompt: str
    ) -> AsyncIterator[str]:
        """Validate the submission, record the user turn and start streaming.

        Every check runs before the stream is created, so a rejected
        submission never reaches the network.
        """
        model_id = validate_model(model)
        api_key = (api_key or "").strip()
        if not api_key:
            raise BadRequestError("An API key is required")
        prompt = (prompt or "").strip()
        if not prompt:
            raise BadRequestError("Prompt must not be empty")

        session = self.sessions.get(session_id)
        session.append(ChatMessage(role="user", content=prompt))
        return stream_completion(
            model_id,
            api_key,
            session,
            endpoint=self.endpoint,
            timeout_s=self.timeout_s,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            transport=self.transport,
        )
