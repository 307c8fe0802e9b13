# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the components unit so this responsibility stays isolated, testable, and easy to evolve.

Component construction behind one interface. The chat page is composed only
against ``ComponentFactory``; each backend decides what a component is
(escaped HTML markup, or a JSON-serialisable descriptor).
"""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence


class ComponentFactory(ABC):
    """Abstract component-construction capability."""

    @abstractmethod
    def dropdown(
        self, name: str, label: str, choices: Sequence[str], value: str | None = None
    ) -> Any: ...

    @abstractmethod
    def textbox(
        self,
        name: str,
        label: str,
        *,
        secret: bool = False,
        multiline: bool = False,
        placeholder: str = "",
    ) -> Any: ...

    @abstractmethod
    def button(self, name: str, label: str) -> Any: ...

    @abstractmethod
    def display_panel(self, name: str, label: str) -> Any: ...

    @abstractmethod
    def state_cell(self, name: str, value: str = "") -> Any: ...

    @abstractmethod
    def form(self, name: str, children: Sequence[Any], *, action: str) -> Any: ...

    @abstractmethod
    def page(self, title: str, children: Sequence[Any]) -> Any: ...


def _attr(value: Any) -> str:
    return html.escape(str(value), quote=True)


class HtmlComponentFactory(ComponentFactory):
    """Server-rendered markup. Every caller-supplied value is escaped."""

    def __init__(self, script_src: str = "/static/chat.js"):
        self.script_src = script_src

    def dropdown(self, name, label, choices, value=None):
        options = "".join(
            f'<option value="{_attr(c)}"{" selected" if c == value else ""}>'
            f"{html.escape(c)}</option>"
            for c in choices
        )
        return (
            f'<label for="{_attr(name)}">{html.escape(label)}</label>'
            f'<select id="{_attr(name)}" name="{_attr(name)}">{options}</select>'
        )

    def textbox(self, name, label, *, secret=False, multiline=False, placeholder=""):
        label_html = f'<label for="{_attr(name)}">{html.escape(label)}</label>'
        if multiline:
            return (
                label_html
                + f'<textarea id="{_attr(name)}" name="{_attr(name)}" rows="3" '
                f'placeholder="{_attr(placeholder)}"></textarea>'
            )
        input_type = "password" if secret else "text"
        # Keys typed into a secret field are never autofilled or remembered.
        extra = ' autocomplete="off"' if secret else ""
        return (
            label_html
            + f'<input type="{input_type}" id="{_attr(name)}" name="{_attr(name)}" '
            f'placeholder="{_attr(placeholder)}"{extra}>'
        )

    def button(self, name, label):
        return f'<button type="submit" id="{_attr(name)}">{html.escape(label)}</button>'

    def display_panel(self, name, label):
        return (
            f'<section id="{_attr(name)}" aria-label="{_attr(label)}" '
            f'aria-live="polite" class="chat-panel"></section>'
        )

    def state_cell(self, name, value=""):
        return f'<input type="hidden" id="{_attr(name)}" value="{_attr(value)}">'

    def form(self, name, children, *, action):
        return (
            f'<form id="{_attr(name)}" data-action="{_attr(action)}">'
            + "".join(children)
            + "</form>"
        )

    def page(self, title, children):
        return (
            "<!DOCTYPE html>"
            '<html lang="en"><head><meta charset="utf-8">'
            f"<title>{html.escape(title)}</title></head><body>"
            f"<h1>{html.escape(title)}</h1>"
            + "".join(children)
            + f'<script src="{_attr(self.script_src)}"></script>'
            + "</body></html>"
        )


class SchemaComponentFactory(ComponentFactory):
    """JSON layout descriptor for script-driven front-ends."""

    def dropdown(self, name, label, choices, value=None):
        return {
            "type": "dropdown",
            "name": name,
            "label": label,
            "choices": list(choices),
            "value": value,
        }

    def textbox(self, name, label, *, secret=False, multiline=False, placeholder=""):
        return {
            "type": "textbox",
            "name": name,
            "label": label,
            "secret": secret,
            "multiline": multiline,
            "placeholder": placeholder,
        }

    def button(self, name, label):
        return {"type": "button", "name": name, "label": label}

    def display_panel(self, name, label):
        return {"type": "display_panel", "name": name, "label": label}

    def state_cell(self, name, value=""):
        return {"type": "state_cell", "name": name, "value": value}

    def form(self, name, children, *, action):
        return {
            "type": "form",
            "name": name,
            "action": action,
            "children": list(children),
        }

    def page(self, title, children) -> Dict[str, Any]:
        components: List[Any] = list(children)
        return {"type": "page", "title": title, "children": components}
