"""Durable log of actions waiting to be delivered."""

from __future__ import annotations

from noteclient.errors import StorageReadError
from noteclient.runtime_logging import RuntimeLogger, get_runtime_logger
from noteclient.storage import ACTIONS_FILE, Clock, StateStorage, SystemClock

PendingActions = dict[str, list[int]]

INSTALLED = "installed"
ACTIVE = "active"


def _coerce(raw: object) -> PendingActions:
    if not isinstance(raw, dict):
        raise StorageReadError(ACTIONS_FILE, f"expected an object, got {type(raw).__name__}")

    actions: PendingActions = {}
    for name, stamps in raw.items():
        if not isinstance(stamps, list):
            raise StorageReadError(ACTIONS_FILE, f"timestamps for {name!r} are not a list")
        try:
            actions[str(name)] = [int(stamp) for stamp in stamps]
        except (TypeError, ValueError) as exc:
            raise StorageReadError(ACTIONS_FILE, f"bad timestamp for {name!r}: {exc}") from exc
    return actions


class ActionLog:
    def __init__(
        self,
        storage: StateStorage,
        clock: Clock | None = None,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self.storage = storage
        self.clock = clock or SystemClock()
        self.logger = logger or get_runtime_logger()

    def load_or_empty(self) -> PendingActions:
        try:
            raw = self.storage.read_json(ACTIONS_FILE)
            if raw is None:
                return {}
            return _coerce(raw)
        except (OSError, StorageReadError) as exc:
            self.logger.failure("actions.load_failed", exc, level="warning")
            return {}

    def record(self, action_name: str) -> int:
        actions = self.load_or_empty()
        timestamp = self.clock.now()
        actions.setdefault(action_name, []).append(timestamp)
        self.stage(actions)
        self.logger.debug("actions.recorded", action=action_name, timestamp=timestamp)
        return timestamp

    def stage(self, actions: PendingActions) -> None:
        self.storage.write_json(ACTIONS_FILE, actions)

    def clear(self) -> None:
        self.storage.delete(ACTIONS_FILE)

    def pending_count(self) -> int:
        return sum(len(stamps) for stamps in self.load_or_empty().values())
