# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Domain exception hierarchy for the service layer.

Purpose: Provide HTTP-agnostic domain exceptions that carry enough context for
the API layer (or a global exception handler) to translate them into proper
HTTP responses. Service code should raise these instead of ``HTTPException``
so that it stays decoupled from any web framework.

The upstream failure classes (``AuthenticationError``, ``RequestError``,
``NetworkError``, ``StreamParseError``) never leave the streaming client: they
are converted into a ``ChatStreamError`` that only carries a sanitized message.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base domain exception that carries an HTTP-equivalent status code.

    All service-layer error conditions should be expressed as subclasses
    of this class.  The global exception handler registered in ``main.py``
    translates these into JSON error responses automatically.
    """

    default_status_code: int = 500

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = (
            status_code if status_code is not None else self.default_status_code
        )


class BadRequestError(ServiceError):
    """Raised when the caller provides invalid or missing input (HTTP 400)."""

    default_status_code = 400


class NotFoundError(ServiceError):
    """Raised when a requested resource does not exist (HTTP 404)."""

    default_status_code = 404


class ConfigurationError(ServiceError):
    """Raised when required configuration is missing or invalid (HTTP 400)."""

    default_status_code = 400


class InvalidModelError(BadRequestError):
    """Raised when the selected model is not on the allow-list."""


class InsecureEndpointError(BadRequestError):
    """Raised when the completions endpoint is not an https:// URL."""


class UpstreamError(ServiceError):
    """Raised when a call to an external service / upstream API fails (HTTP 502)."""

    default_status_code = 502

    def __init__(
        self,
        detail: str,
        status_code: int | None = None,
        upstream_status: int | None = None,
    ):
        super().__init__(detail, status_code)
        self.upstream_status = upstream_status


class AuthenticationError(UpstreamError):
    """Upstream rejected the credential (HTTP 401/403)."""

    default_status_code = 401


class RequestError(UpstreamError):
    """Upstream answered with any other non-success status."""


class NetworkError(UpstreamError):
    """Connection or timeout failure talking to the upstream."""

    default_status_code = 504


class StreamParseError(UpstreamError):
    """Malformed or incomplete incremental data from the upstream."""


class ChatStreamError(UpstreamError):
    """Sanitized failure surfaced to the UI; ``detail`` is always a safe message."""
