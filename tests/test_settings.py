from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from noteclient.config.models import ClientSettings, CollectorSettings
from noteclient.config.store import SettingsStore


class SettingsStoreTests(unittest.TestCase):
    def test_load_save_update_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            store = SettingsStore(path)

            settings = store.load()
            self.assertTrue(path.exists())
            self.assertEqual(settings.schema_version, 1)
            self.assertIsNone(settings.collector.url)

            updated = store.update("collector.url", "https://collector.test/hook")
            self.assertEqual(updated.collector.url, "https://collector.test/hook")

            reloaded = store.load()
            self.assertEqual(reloaded.collector.url, "https://collector.test/hook")

    def test_unknown_key_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = SettingsStore(Path(tmp) / "settings.json")
            with self.assertRaises(KeyError):
                store.update("collector.nope", 1)
            with self.assertRaises(KeyError):
                store.update("enabled.nested", 1)

    def test_corrupt_file_is_backed_up(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text("{broken", encoding="utf-8")

            settings = SettingsStore(path).load()

            self.assertTrue(settings.enabled)
            self.assertEqual(path.with_suffix(".corrupt.json").read_text(encoding="utf-8"), "{broken")


class ClientSettingsTests(unittest.TestCase):
    def test_state_dir_is_expanded(self) -> None:
        settings = ClientSettings(state_dir="~/notes-state")
        self.assertEqual(settings.state_path(), Path("~/notes-state").expanduser())

    def test_identifier_defaults_to_unset(self) -> None:
        settings = ClientSettings()
        self.assertIsNone(settings.extension.identifier)
        with self.assertRaises(ValidationError):
            ClientSettings.model_validate({"extension": {"identifier": "  "}})

    def test_timeout_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            CollectorSettings(timeout_seconds=0)


if __name__ == "__main__":
    unittest.main()
