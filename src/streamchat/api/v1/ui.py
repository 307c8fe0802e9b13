# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Page and layout routes. Rendering only; all behaviour lives in the chat routes."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from streamchat.services.chat.validator import DEFAULT_MODEL, list_models
from streamchat.ui.components import HtmlComponentFactory, SchemaComponentFactory
from streamchat.ui.layout import compose_chat_ui

# Mounted without prefix so the page is served at "/".
page_router = APIRouter(tags=["UI"])
router = APIRouter(prefix="/ui", tags=["UI"])


@page_router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def chat_page() -> HTMLResponse:
    markup = compose_chat_ui(HtmlComponentFactory(), list_models(), DEFAULT_MODEL)
    return HTMLResponse(markup)


@router.get("/layout")
async def chat_layout() -> dict:
    """JSON descriptor of the same page for script-driven front-ends."""
    return compose_chat_ui(SchemaComponentFactory(), list_models(), DEFAULT_MODEL)
