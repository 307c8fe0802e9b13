# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the conftest unit so this responsibility stays isolated, testable, and easy to evolve."""

import os

import pytest

from streamchat.services.llm import llm_logging


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    # A developer's shell settings must not leak into config loading.
    for name in list(os.environ):
        if name.startswith("STREAMCHAT_"):
            monkeypatch.delenv(name, raising=False)
    llm_logging.clear_llm_logs()
    yield
    llm_logging.clear_llm_logs()
