"""Tests for the on-disk preference store."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from scriptdeck.preferences import Preference, PreferenceStore, preference_env_value


class PreferenceStoreTests(unittest.TestCase):
    def test_command_scope_shadows_extension_scope(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = PreferenceStore(Path(tmp) / "prefs" / "preferences.json")
            store.set(
                Preference(extension="gh", name="TOKEN", value="ext"),
                Preference(extension="gh", name="TOKEN", value="cmd", script="repos"),
            )
            self.assertEqual(store.get("gh", "repos", "TOKEN").value, "cmd")
            self.assertEqual(store.get("gh", "issues", "TOKEN").value, "ext")
            self.assertIsNone(store.get("other", "repos", "TOKEN"))

    def test_values_survive_a_new_store_instance(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "preferences.json"
            PreferenceStore(path).set(Preference(extension="gh", name="TOKEN", value="abc"))
            PreferenceStore(path).set(Preference(extension="gh", name="TOKEN", value="def"))
            self.assertEqual(PreferenceStore(path).get("gh", "", "TOKEN").value, "def")

    def test_corrupt_file_reads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "preferences.json"
            path.write_text("{broken", encoding="utf-8")
            self.assertIsNone(PreferenceStore(path).get("gh", "", "TOKEN"))

    def test_write_failure_raises_os_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")
            store = PreferenceStore(blocker / "preferences.json")
            with self.assertRaises(OSError):
                store.set(Preference(extension="gh", name="TOKEN", value="abc"))

    def test_env_values_spell_booleans(self) -> None:
        self.assertEqual(preference_env_value(True), "true")
        self.assertEqual(preference_env_value(False), "false")
        self.assertEqual(preference_env_value(3), "3")
