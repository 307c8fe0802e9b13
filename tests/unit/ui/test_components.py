# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import json
from unittest import TestCase

from streamchat.ui.components import (
    ComponentFactory,
    HtmlComponentFactory,
    SchemaComponentFactory,
)
from streamchat.ui.layout import STREAM_ACTION, compose_chat_ui

MODELS = ["metaLlama3-8b-instruct", "gemma-7b-it"]


class RecordingFactory(ComponentFactory):
    """Records which constructors the layout asks for."""

    def __init__(self):
        self.calls = []

    def _rec(self, kind, name):
        self.calls.append((kind, name))
        return kind

    def dropdown(self, name, label, choices, value=None):
        return self._rec("dropdown", name)

    def textbox(self, name, label, *, secret=False, multiline=False, placeholder=""):
        return self._rec("textbox", name)

    def button(self, name, label):
        return self._rec("button", name)

    def display_panel(self, name, label):
        return self._rec("display_panel", name)

    def state_cell(self, name, value=""):
        return self._rec("state_cell", name)

    def form(self, name, children, *, action):
        return self._rec("form", name)

    def page(self, title, children):
        return self._rec("page", title)


class ComposeChatUiTest(TestCase):
    def test_layout_uses_only_the_interface(self):
        factory = RecordingFactory()
        compose_chat_ui(factory, MODELS)
        kinds = {kind for kind, _ in factory.calls}
        self.assertEqual(
            kinds,
            {"dropdown", "textbox", "button", "display_panel", "state_cell", "form", "page"},
        )
        self.assertIn(("textbox", "api_key"), factory.calls)

    def test_html_backend(self):
        markup = compose_chat_ui(HtmlComponentFactory(), MODELS, "gemma-7b-it")
        self.assertTrue(markup.startswith("<!DOCTYPE html>"))
        self.assertIn('<option value="gemma-7b-it" selected>', markup)
        self.assertIn('type="password" id="api_key"', markup)
        self.assertIn('autocomplete="off"', markup)
        self.assertIn('<textarea id="prompt"', markup)
        self.assertIn('id="chat"', markup)
        self.assertIn('<script src="/static/chat.js">', markup)

    def test_html_backend_escapes_values(self):
        factory = HtmlComponentFactory()
        out = factory.dropdown("m", "Model", ['"><script>x</script>'])
        self.assertNotIn("<script>", out)
        self.assertIn("&lt;script&gt;", out)

    def test_schema_backend(self):
        layout = compose_chat_ui(SchemaComponentFactory(), MODELS, "unknown-model")
        json.dumps(layout)
        self.assertEqual(layout["type"], "page")
        panel, form = layout["children"]
        self.assertEqual(panel["type"], "display_panel")
        self.assertEqual(form["action"], STREAM_ACTION)
        dropdown = form["children"][0]
        self.assertEqual(dropdown["choices"], MODELS)
        self.assertEqual(dropdown["value"], MODELS[0])
        api_key = next(c for c in form["children"] if c["name"] == "api_key")
        self.assertTrue(api_key["secret"])
