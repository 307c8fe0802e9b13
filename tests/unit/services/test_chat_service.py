# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import asyncio
from unittest import TestCase
from unittest.mock import patch

from streamchat.core.config import load_app_config
from streamchat.services.chat.chat_service import ChatService
from streamchat.services.chat.session_state import SessionRegistry
from streamchat.services.exceptions import (
    BadRequestError,
    InsecureEndpointError,
    InvalidModelError,
    NotFoundError,
)
from tests.unit.stream_mocks import DONE_LINE, install_stream, sse


async def _collect(agen):
    return [fragment async for fragment in agen]


class ChatServiceTest(TestCase):
    def setUp(self):
        self.registry = SessionRegistry()
        self.service = ChatService(
            self.registry, endpoint="https://llm.example.com/v1/chat/completions"
        )
        self.sid = self.registry.create()

    @patch("streamchat.services.llm.llm_stream_ops.httpx.AsyncClient")
    def test_invalid_model_never_reaches_transport(self, MockClientClass):
        install_stream(MockClientClass, [sse("x"), DONE_LINE])

        for model in ("gpt-4", "", "llama"):
            with self.assertRaises(InvalidModelError):
                self.service.submit(self.sid, model, "sk-1", "hi")

        self.assertEqual(MockClientClass.call_count, 0)
        self.assertEqual(len(self.registry.get(self.sid)), 0)

    def test_missing_key_or_prompt(self):
        with self.assertRaises(BadRequestError):
            self.service.submit(self.sid, "gemma-7b-it", "   ", "hi")
        with self.assertRaises(BadRequestError):
            self.service.submit(self.sid, "gemma-7b-it", "sk-1", "  ")
        self.assertEqual(len(self.registry.get(self.sid)), 0)

    def test_unknown_session(self):
        with self.assertRaises(NotFoundError):
            self.service.submit("nope", "gemma-7b-it", "sk-1", "hi")

    @patch("streamchat.services.llm.llm_stream_ops.httpx.AsyncClient")
    def test_turn_records_user_then_assistant(self, MockClientClass):
        client, _ = install_stream(MockClientClass, [sse("Hi "), sse("there"), DONE_LINE])

        stream = self.service.submit(self.sid, "gemma-7b-it", " sk-1 ", " hello ")
        fragments = asyncio.run(_collect(stream))

        self.assertEqual(fragments, ["Hi ", "there"])
        snap = self.registry.get(self.sid).snapshot()
        self.assertEqual([(m.role, m.content) for m in snap], [
            ("user", "hello"),
            ("assistant", "Hi there"),
        ])
        kwargs = client.stream.call_args.kwargs
        self.assertEqual(kwargs["json"]["model"], "google/gemma-7b-it")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-1")

    def test_insecure_endpoint_rejected_at_construction(self):
        with self.assertRaises(InsecureEndpointError):
            ChatService(self.registry, endpoint="http://llm.example.com/v1")

    def test_from_config(self):
        config = load_app_config(path=None, defaults={"session": {"history_limit": 4}})
        service = ChatService.from_config(config)
        self.assertEqual(service.sessions.history_limit, 4)
        self.assertEqual(service.timeout_s, 60)
        self.assertTrue(service.endpoint.startswith("https://"))
