# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm request helpers unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

from typing import Dict
from urllib.parse import urlsplit

import httpx

from streamchat.services.exceptions import InsecureEndpointError


def validate_endpoint(endpoint: str) -> str:
    """Reject anything that is not a plain https:// URL before a request is built."""
    if not isinstance(endpoint, str) or not endpoint:
        raise InsecureEndpointError("Completions endpoint is not configured")
    parts = urlsplit(endpoint)
    if parts.scheme != "https":
        raise InsecureEndpointError("Completions endpoint must use https")
    if not parts.hostname or "@" in parts.netloc:
        raise InsecureEndpointError("Completions endpoint is not a valid URL")
    return endpoint


def build_headers(api_key: str) -> Dict[str, str]:
    headers: Dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "text/event-stream",
    }
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def build_timeout(timeout_s: int | float | None) -> httpx.Timeout:
    try:
        return httpx.Timeout(float(timeout_s or 60))
    except (TypeError, ValueError):
        return httpx.Timeout(60.0)
