# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Chat page composition, written only against ``ComponentFactory``."""

from __future__ import annotations

from typing import Any, Sequence

from streamchat.ui.components import ComponentFactory

PAGE_TITLE = "StreamChat"
STREAM_ACTION = "/api/v1/sessions/{session_id}/stream"


def compose_chat_ui(
    factory: ComponentFactory,
    models: Sequence[str],
    selected: str | None = None,
    *,
    title: str = PAGE_TITLE,
) -> Any:
    """Model dropdown, API-key field, prompt box, send button, chat panel, session cell."""
    if selected not in models:
        selected = models[0] if models else None

    form = factory.form(
        "chat-form",
        [
            factory.dropdown("model", "Model", models, selected),
            factory.textbox(
                "api_key", "API key", secret=True, placeholder="Paste your API key"
            ),
            factory.textbox(
                "prompt", "Message", multiline=True, placeholder="Ask something..."
            ),
            factory.button("send", "Send"),
            factory.state_cell("session_id"),
        ],
        action=STREAM_ACTION,
    )
    return factory.page(title, [factory.display_panel("chat", "Conversation"), form])
