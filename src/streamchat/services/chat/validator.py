# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Model allow-list checks and mapping of upstream failures to safe messages."""

from __future__ import annotations

import httpx

from streamchat.services.exceptions import (
    AuthenticationError,
    InvalidModelError,
    NetworkError,
    RequestError,
)

# Display name -> upstream model identifier on the aggregation API.
ALLOWED_MODELS: dict[str, str] = {
    "metaLlama3-8b-instruct": "meta-llama/llama-3-8b-instruct",
    "mistral-7b-instruct": "mistralai/mistral-7b-instruct",
    "gemma-7b-it": "google/gemma-7b-it",
    "horizon-beta": "openrouter/horizon-beta",
}

DEFAULT_MODEL = "metaLlama3-8b-instruct"

MSG_INVALID_KEY = "invalid key or permission"
MSG_REQUEST_FAILED = "model request failed"
MSG_NETWORK = "network issue, try again"


def list_models() -> list[str]:
    return list(ALLOWED_MODELS)


def validate_model(name: str | None) -> str:
    """Return the upstream model id for an allow-listed name.

    Raises InvalidModelError for anything else; the rejected value is not
    echoed back.
    """
    if not isinstance(name, str) or name not in ALLOWED_MODELS:
        raise InvalidModelError("Unsupported model")
    return ALLOWED_MODELS[name]


def classify_status(status_code: int) -> type[RequestError] | type[AuthenticationError]:
    if status_code in (401, 403):
        return AuthenticationError
    return RequestError


def sanitize_error(raw_error: BaseException | int) -> str:
    """Map a transport/auth failure (or a bare HTTP status) to a fixed message.

    The returned string never includes headers, bodies or exception text.
    """
    if isinstance(raw_error, int):
        if raw_error in (401, 403):
            return MSG_INVALID_KEY
        return MSG_REQUEST_FAILED

    if isinstance(raw_error, AuthenticationError):
        return MSG_INVALID_KEY
    if isinstance(raw_error, httpx.HTTPStatusError):
        return sanitize_error(raw_error.response.status_code)
    if isinstance(
        raw_error, (NetworkError, httpx.TransportError, TimeoutError, ConnectionError)
    ):
        return MSG_NETWORK
    # RequestError, StreamParseError and anything unrecognised.
    return MSG_REQUEST_FAILED
