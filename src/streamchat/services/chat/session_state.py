# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the session state unit so this responsibility stays isolated, testable, and easy to evolve.

In-memory chat history. Each session owns one ``SessionState``; the
``SessionRegistry`` maps session ids to their states. Nothing here touches
disk or any external store.
"""

from __future__ import annotations

import uuid
from collections import deque
from typing import Dict, Iterator

from streamchat.core.config import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT
from streamchat.models.chat import ChatMessage
from streamchat.services.exceptions import NotFoundError


class SessionState:
    """Ordered, bounded chat history. Oldest messages are evicted first."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")
        self.limit = limit
        self._messages: deque[ChatMessage] = deque(maxlen=limit)

    def append(self, message: ChatMessage) -> None:
        if not isinstance(message, ChatMessage):
            raise TypeError("SessionState only stores ChatMessage instances")
        self._messages.append(message)

    def snapshot(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.snapshot())


class SessionRegistry:
    """Session id -> independently owned SessionState."""

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self.history_limit = history_limit
        self._sessions: Dict[str, SessionState] = {}

    def create(self) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = SessionState(self.history_limit)
        return session_id

    def get(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            raise NotFoundError("Unknown session")
        return state

    def get_or_create(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            state = SessionState(self.history_limit)
            self._sessions[session_id] = state
        return state

    def drop(self, session_id: str) -> bool:
        """End a session; its history is discarded."""
        state = self._sessions.pop(session_id, None)
        if state is None:
            return False
        state.clear()
        return True

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
