from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from noteclient.errors import DeliveryError
from noteclient.runtime_logging import RuntimeLogger


def local_ms(*args: int) -> int:
    return int(datetime(*args).timestamp() * 1000)


class FixedClock:
    def __init__(self, now: int) -> None:
        self.current = now

    def now(self) -> int:
        return self.current

    def advance(self, ms: int) -> None:
        self.current += ms


class FakeTransport:
    def __init__(self, *, fail_after: int | None = None, fail_analytics: bool = False) -> None:
        self.fail_after = fail_after
        self.fail_analytics = fail_analytics
        self.posted: list[dict[str, Any]] = []
        self.analytics: list[tuple[str, str]] = []
        self.attempts = 0

    async def post_event(self, payload: dict[str, Any]) -> None:
        self.attempts += 1
        if self.fail_after is not None and len(self.posted) >= self.fail_after:
            raise DeliveryError("collector unreachable")
        self.posted.append(payload)

    async def send_analytics(self, category: str, action: str) -> None:
        if self.fail_analytics:
            raise DeliveryError("analytics unreachable")
        self.analytics.append((category, action))


def make_logger(root: Path) -> RuntimeLogger:
    return RuntimeLogger(level="debug", sink_path=root / "runtime.jsonl")
