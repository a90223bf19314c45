"""Semantic version ordering and installed-version discovery."""

from __future__ import annotations

from functools import cmp_to_key
from pathlib import Path
from typing import Iterable

from semver import Version

from noteclient.runtime_logging import RuntimeLogger, get_runtime_logger


def parse_version(value: str) -> Version:
    """Parse a semver string; ``1.0`` is read as ``1.0.0``. Raises ValueError."""
    return Version.parse(value.strip(), optional_minor_and_patch=True)


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` sorts before, equal to, or after ``b``.

    Build metadata does not take part in the ordering.
    """
    result = parse_version(a).compare(parse_version(b))
    return (result > 0) - (result < 0)


def sort_versions(versions: Iterable[str]) -> list[str]:
    return sorted(versions, key=cmp_to_key(compare_versions))


def is_valid_version(value: str) -> bool:
    try:
        parse_version(value)
    except (TypeError, ValueError):
        return False
    return True


def split_versioned_name(name: str) -> tuple[str, str] | None:
    """Split ``publisher.name-1.2.0-rc.1`` into identifier and version."""
    start = 0
    while True:
        dash = name.find("-", start)
        if dash <= 0:
            return None
        suffix = name[dash + 1 :]
        if is_valid_version(suffix):
            return name[:dash], suffix
        start = dash + 1


def installed_versions(
    extensions_dir: Path,
    identifier: str,
    logger: RuntimeLogger | None = None,
) -> list[str]:
    """Versions of every ``<identifier>-<version>`` directory under ``extensions_dir``.

    Directory names are matched case-insensitively, as the editor lowercases
    the publisher-qualified id when it installs an extension.
    """
    logger = logger or get_runtime_logger()
    prefix = f"{identifier}-".lower()
    if not extensions_dir.is_dir():
        return []

    versions: list[str] = []
    for entry in extensions_dir.iterdir():
        if not entry.is_dir() or not entry.name.lower().startswith(prefix):
            continue
        suffix = entry.name[len(prefix):]
        if not is_valid_version(suffix):
            logger.warning("versions.skipped_directory", directory=entry.name)
            continue
        versions.append(suffix)
    return sort_versions(versions)


def previous_version(installed: Iterable[str], current: str) -> str:
    """The version installed right before ``current``.

    With fewer than two installations this is ``current`` itself.
    """
    ordered = sort_versions(installed)
    if len(ordered) < 2:
        return current
    return ordered[-2]
