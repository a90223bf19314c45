"""Wall clock and flat-file state storage."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Protocol

from noteclient.errors import StorageReadError

ID_FILE = "id"
ACTIONS_FILE = "actions"
ACTIVE_FILE = "active"


class Clock(Protocol):
    def now(self) -> int:
        """Current time as epoch milliseconds."""
        ...


class SystemClock:
    def now(self) -> int:
        return time.time_ns() // 1_000_000


class StateStorage:
    """Flat files rooted at a single per-user state directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path(self, name: str) -> Path:
        return self.root / name

    def ensure_root(self) -> bool:
        """Create the state directory, returning True if it did not exist yet."""
        if self.root.is_dir():
            return False
        self.root.mkdir(parents=True, exist_ok=True)
        return True

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def read_text(self, name: str) -> str | None:
        try:
            return self.path(name).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write_text(self, name: str, text: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.path(name).write_text(text, encoding="utf-8")

    def read_json(self, name: str) -> Any:
        raw = self.read_text(name)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageReadError(name, str(exc)) from exc

    def write_json(self, name: str, value: Any) -> None:
        self.write_text(name, json.dumps(value))

    def delete(self, name: str) -> None:
        self.path(name).unlink(missing_ok=True)

    def list(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(entry.name for entry in self.root.iterdir() if entry.is_file())
