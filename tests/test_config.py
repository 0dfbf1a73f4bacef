"""Tests for config loading and input sanitization."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from scriptdeck import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("scriptdeck.config.CONFIG_PATH", Path(tmp) / "config.json"):
                loaded = config.load_config()
        self.assertEqual(loaded.height, 0)
        self.assertEqual(loaded.root_items, [])
        self.assertEqual(loaded.extension_dirs, [config.EXTENSIONS_DIR])

    def test_valid_fields_are_loaded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps(
                    {
                        "height": 12,
                        "rootItems": [{"extension": "gh", "script": "repos", "with": {"owner": "me"}}],
                        "extensions": [tmp],
                    }
                ),
                encoding="utf-8",
            )
            with mock.patch("scriptdeck.config.CONFIG_PATH", config_path):
                loaded = config.load_config()

        self.assertEqual(loaded.height, 12)
        self.assertEqual(loaded.root_items[0].extension, "gh")
        self.assertEqual(loaded.root_items[0].with_, {"owner": "me"})
        self.assertEqual(loaded.extension_dirs, [Path(tmp), config.EXTENSIONS_DIR])

    def test_invalid_fields_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"height": True, "rootItems": [{"title": "no script"}], "extensions": "nope"}),
                encoding="utf-8",
            )
            with mock.patch("scriptdeck.config.CONFIG_PATH", config_path):
                with self.assertLogs("scriptdeck.config", level="WARNING"):
                    loaded = config.load_config()

        self.assertEqual(loaded.height, 0)
        self.assertEqual(loaded.root_items, [])
        self.assertEqual(loaded.extension_dirs, [config.EXTENSIONS_DIR])

    def test_non_object_config_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[1, 2, 3]", encoding="utf-8")
            with mock.patch("scriptdeck.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config_data(), {})
