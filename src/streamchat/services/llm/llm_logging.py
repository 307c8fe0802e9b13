# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm logging unit so this responsibility stays isolated, testable, and easy to evolve.

The log is shared by every session in the process, so entries carry request
metadata only: no credentials, no message text and no reply text. Auth
headers are masked when the entry is created, and failures are recorded by
class name and status code only. Nothing is written to disk.
"""

from __future__ import annotations

import datetime
import uuid
from typing import Any, Dict, List

MAX_LOG_ENTRIES = 100

_SECRET_HEADERS = ("authorization", "x-api-key", "proxy-authorization")
# Request body fields copied into an entry; everything else is dropped.
_LOGGED_BODY_KEYS = ("model", "stream", "temperature", "max_tokens")

# Global list to store LLM request metadata for the current process
llm_logs: List[Dict[str, Any]] = []


def _now() -> str:
    return datetime.datetime.now().isoformat()


def add_llm_log(log_entry: Dict[str, Any]):
    """Add a log entry to the global list, keeping only the last 100 entries."""
    if log_entry not in llm_logs:
        llm_logs.append(log_entry)
        if len(llm_logs) > MAX_LOG_ENTRIES:
            llm_logs.pop(0)


def clear_llm_logs() -> None:
    llm_logs.clear()


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        k: ("***" if k.lower() in _SECRET_HEADERS else v) for k, v in headers.items()
    }


def summarize_body(body: Any) -> Dict[str, Any]:
    """Reduce a completions request body to content-free metadata."""
    if not isinstance(body, dict):
        return {}
    summary = {k: body[k] for k in _LOGGED_BODY_KEYS if k in body}
    messages = body.get("messages")
    if isinstance(messages, list):
        summary["message_count"] = len(messages)
    return summary


def create_log_entry(
    url: str, method: str, headers: Dict[str, str], body: Any, streaming: bool = False
) -> Dict[str, Any]:
    """Create a new log entry structure."""
    return {
        "id": str(uuid.uuid4()),
        "timestamp_start": _now(),
        "timestamp_end": None,
        "request": {
            "url": url,
            "method": method,
            "headers": redact_headers(headers),
            "body": summarize_body(body),
        },
        "response": {
            "status_code": None,
            "streaming": streaming,
            "fragments": 0,
            "content_length": 0,
            "completed": False,
            "error": None,
        },
    }


def record_fragment(log_entry: Dict[str, Any], text: str) -> None:
    log_entry["response"]["fragments"] += 1
    log_entry["response"]["content_length"] += len(text)


def record_error(log_entry: Dict[str, Any] | None, exc: BaseException) -> None:
    """Record a failure by kind only; messages may carry upstream text."""
    if not log_entry:
        return
    log_entry["response"]["error"] = type(exc).__name__
    status_code = getattr(exc, "upstream_status", None)
    if status_code is not None:
        log_entry["response"]["status_code"] = status_code
    log_entry["timestamp_end"] = _now()


def finish_log_entry(log_entry: Dict[str, Any] | None, completed: bool) -> None:
    if not log_entry:
        return
    log_entry["response"]["completed"] = completed
    if log_entry["timestamp_end"] is None:
        log_entry["timestamp_end"] = _now()
    add_llm_log(log_entry)
