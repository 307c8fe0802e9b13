# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Shared fakes for tests that patch ``httpx.AsyncClient``."""

import json
from unittest.mock import AsyncMock, MagicMock


def sse(content=None, finish_reason=None) -> str:
    delta = {} if content is None else {"content": content}
    return "data: " + json.dumps(
        {"choices": [{"delta": delta, "finish_reason": finish_reason}]}
    )


DONE_LINE = "data: [DONE]"


def install_stream(
    MockClientClass,
    lines=(),
    *,
    status_code=200,
    content_type="text/event-stream",
    body=b"",
):
    """Wire a patched AsyncClient class to a fake streamed response.

    ``lines`` may contain exception instances; they are raised at that point
    of the stream, after the preceding lines were delivered.
    """
    mock_client_instance = MagicMock()
    MockClientClass.return_value = mock_client_instance
    mock_client_instance.__aenter__ = AsyncMock(return_value=mock_client_instance)
    mock_client_instance.__aexit__ = AsyncMock(return_value=False)

    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.headers = {"content-type": content_type}
    mock_response.aread = AsyncMock(return_value=body)

    mock_stream_ctx = MagicMock()
    mock_stream_ctx.__aenter__ = AsyncMock(return_value=mock_response)
    mock_stream_ctx.__aexit__ = AsyncMock(return_value=False)
    mock_client_instance.stream.return_value = mock_stream_ctx

    async def fake_aiter_lines():
        for line in lines:
            if isinstance(line, BaseException):
                raise line
            yield line

    mock_response.aiter_lines.side_effect = fake_aiter_lines
    return mock_client_instance, mock_stream_ctx
