# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import json
import os
import tempfile
from pathlib import Path
from unittest import TestCase

from streamchat.core.config import DEFAULTS, load_app_config
from streamchat.services.exceptions import ConfigurationError


class ConfigLoaderTest(TestCase):
    def setUp(self):
        self.td = tempfile.TemporaryDirectory()
        self.addCleanup(self.td.cleanup)
        self.cfg_path = Path(self.td.name) / "app.json"

    def _env(self, **values):
        for k, v in values.items():
            os.environ[k] = v
            self.addCleanup(os.environ.pop, k, None)

    def test_defaults_when_file_missing(self):
        cfg = load_app_config(self.cfg_path)
        self.assertEqual(
            cfg["llm"]["endpoint"], "https://openrouter.ai/api/v1/chat/completions"
        )
        self.assertEqual(cfg["session"]["history_limit"], 25)
        self.assertEqual(cfg["server"]["port"], 7860)
        self.assertIsNone(cfg["llm"]["max_tokens"])

    def test_env_overrides_file_and_defaults(self):
        self.cfg_path.write_text(
            json.dumps(
                {
                    "llm": {"endpoint": "https://${LLM_HOST}/v1/chat", "timeout_s": 10},
                    "session": {"history_limit": 12},
                }
            ),
            encoding="utf-8",
        )
        self._env(
            LLM_HOST="gateway.example.com",
            STREAMCHAT_TIMEOUT_S="20",
            STREAMCHAT_PORT="9000",
        )

        cfg = load_app_config(self.cfg_path)

        self.assertEqual(cfg["llm"]["endpoint"], "https://gateway.example.com/v1/chat")
        self.assertEqual(cfg["llm"]["timeout_s"], 20)
        self.assertEqual(cfg["session"]["history_limit"], 12)
        self.assertEqual(cfg["server"]["port"], 9000)

    def test_config_file_from_environment(self):
        self.cfg_path.write_text(json.dumps({"server": {"port": 8123}}), encoding="utf-8")
        self._env(STREAMCHAT_CONFIG=str(self.cfg_path))
        self.assertEqual(load_app_config()["server"]["port"], 8123)

    def test_plain_http_endpoint_rejected(self):
        self.cfg_path.write_text(
            json.dumps({"llm": {"endpoint": "http://insecure.example.com/v1"}}),
            encoding="utf-8",
        )
        with self.assertRaises(ConfigurationError):
            load_app_config(self.cfg_path)

    def test_invalid_values(self):
        self._env(STREAMCHAT_PORT="not-a-port")
        with self.assertRaises(ConfigurationError):
            load_app_config(self.cfg_path)

    def test_malformed_json(self):
        self.cfg_path.write_text("{broken", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_app_config(self.cfg_path)

    def test_defaults_are_not_mutated(self):
        self.cfg_path.write_text(
            json.dumps({"llm": {"timeout_s": "15"}}), encoding="utf-8"
        )
        load_app_config(self.cfg_path)
        self.assertEqual(DEFAULTS["llm"]["timeout_s"], 60)

    def test_history_limit_cannot_exceed_cap(self):
        self._env(STREAMCHAT_HISTORY_LIMIT="26")
        with self.assertRaises(ConfigurationError):
            load_app_config(self.cfg_path)

    def test_history_limit_from_file_above_cap(self):
        self.cfg_path.write_text(
            json.dumps({"session": {"history_limit": 100}}), encoding="utf-8"
        )
        with self.assertRaises(ConfigurationError):
            load_app_config(self.cfg_path)
