# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the debug unit so this responsibility stays isolated, testable, and easy to evolve."""

from fastapi import APIRouter

from streamchat.services.llm.llm_logging import clear_llm_logs, llm_logs

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/llm_logs")
async def get_llm_logs():
    """Redacted request log for the current process (newest last)."""
    return llm_logs


@router.delete("/llm_logs")
async def delete_llm_logs():
    clear_llm_logs()
    return {"status": "ok"}
