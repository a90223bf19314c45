from __future__ import annotations

import itertools
import tempfile
import unittest
from pathlib import Path

from noteclient.versioning import (
    compare_versions,
    installed_versions,
    is_valid_version,
    previous_version,
    sort_versions,
    split_versioned_name,
)

from support import make_logger

SAMPLE = [
    "0.9.0",
    "1.0.0-alpha",
    "1.0.0-rc.1",
    "1.0.0",
    "1.0.1",
    "1.2.0-1",
    "1.2.0",
    "1.2.0+build.5",
    "1.10.0",
    "2.0.0",
]


class CompareVersionsTests(unittest.TestCase):
    def test_numeric_not_lexical(self) -> None:
        self.assertEqual(compare_versions("1.10.0", "1.9.0"), 1)
        self.assertEqual(sort_versions(["1.10.0", "1.2.0", "1.9.3"]), ["1.2.0", "1.9.3", "1.10.0"])

    def test_prerelease_precedes_release(self) -> None:
        self.assertEqual(compare_versions("1.0.0-alpha", "1.0.0"), -1)
        self.assertEqual(compare_versions("1.0.0-alpha", "1.0.0-rc.1"), -1)

    def test_numeric_prerelease_precedes_release(self) -> None:
        self.assertEqual(compare_versions("1.2.0-1", "1.2.0"), -1)
        self.assertEqual(compare_versions("1.2.0-1", "1.2.0-2"), -1)
        self.assertEqual(compare_versions("1.3.0-next.1", "1.3.0"), -1)

    def test_build_metadata_is_ignored(self) -> None:
        self.assertEqual(compare_versions("1.2.0+b", "1.2.0"), 0)
        self.assertEqual(compare_versions("1.2.0+build.5", "1.2.0+build.9"), 0)

    def test_validity(self) -> None:
        self.assertTrue(is_valid_version("1.3.0-next.1"))
        self.assertTrue(is_valid_version("1.2"))
        self.assertFalse(is_valid_version("nightly"))
        self.assertFalse(is_valid_version("1.2.0.post1"))

    def test_equality(self) -> None:
        for version in SAMPLE:
            self.assertEqual(compare_versions(version, version), 0)
        self.assertEqual(compare_versions("1.0", "1.0.0"), 0)

    def test_total_and_transitive(self) -> None:
        for a, b in itertools.product(SAMPLE, repeat=2):
            self.assertEqual(compare_versions(a, b), -compare_versions(b, a))
        for a, b, c in itertools.permutations(SAMPLE, 3):
            if compare_versions(a, b) < 0 and compare_versions(b, c) < 0:
                self.assertLess(compare_versions(a, c), 0)


class PreviousVersionTests(unittest.TestCase):
    def test_second_highest(self) -> None:
        self.assertEqual(previous_version(["1.2.0", "1.0.0", "1.3.0"], "1.3.0"), "1.2.0")

    def test_prerelease_of_current_is_previous(self) -> None:
        self.assertEqual(previous_version(["1.1.0", "1.2.0-1", "1.2.0"], "1.2.0"), "1.2.0-1")

    def test_single_installation_is_current(self) -> None:
        self.assertEqual(previous_version(["1.3.0"], "1.3.0"), "1.3.0")
        self.assertEqual(previous_version([], "1.3.0"), "1.3.0")


class InstalledVersionsTests(unittest.TestCase):
    def test_lists_matching_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ["vscode-note-1.10.0", "vscode-note-1.9.0", "vscode-note-nightly", "other-2.0.0"]:
                (root / name).mkdir()
            (root / "vscode-note-3.0.0").write_text("not a directory", encoding="utf-8")

            versions = installed_versions(root, "vscode-note", logger=make_logger(root))

        self.assertEqual(versions, ["1.9.0", "1.10.0"])

    def test_publisher_qualified_prerelease_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ["acme.vscode-note-1.2.0", "acme.vscode-note-1.3.0-next.1", "acme.vscode-note-1.2.0-1"]:
                (root / name).mkdir()

            versions = installed_versions(root, "Acme.vscode-note", logger=make_logger(root))

        self.assertEqual(versions, ["1.2.0-1", "1.2.0", "1.3.0-next.1"])

    def test_missing_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.assertEqual(installed_versions(root / "absent", "vscode-note", logger=make_logger(root)), [])


class SplitVersionedNameTests(unittest.TestCase):
    def test_splits_on_first_dash_followed_by_a_version(self) -> None:
        self.assertEqual(split_versioned_name("acme.vscode-note-1.2.0"), ("acme.vscode-note", "1.2.0"))
        self.assertEqual(
            split_versioned_name("acme.vscode-note-1.3.0-next.1"),
            ("acme.vscode-note", "1.3.0-next.1"),
        )

    def test_unversioned_name(self) -> None:
        self.assertIsNone(split_versioned_name("acme.vscode-note"))
        self.assertIsNone(split_versioned_name("vscode-note-nightly"))


if __name__ == "__main__":
    unittest.main()
