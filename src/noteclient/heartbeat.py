"""Once-per-day "active" signal."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from noteclient.actions import ACTIVE, ActionLog
from noteclient.dispatcher import ActionDispatcher, FlushResult
from noteclient.errors import StorageReadError
from noteclient.runtime_logging import RuntimeLogger, get_runtime_logger
from noteclient.storage import ACTIVE_FILE, Clock, StateStorage, SystemClock
from noteclient.transport import Transport

DAY = timedelta(hours=24)


@dataclass(slots=True)
class HeartbeatResult:
    sent: bool
    flush: FlushResult | None = None
    error: BaseException | None = None


def next_boundary(marker_ms: int) -> datetime:
    """Local midnight of the day reached 24 elapsed hours after the marker."""
    elapsed = marker_ms / 1000 + DAY.total_seconds()
    return datetime.fromtimestamp(elapsed).replace(hour=0, minute=0, second=0, microsecond=0)


class Heartbeat:
    def __init__(
        self,
        storage: StateStorage,
        log: ActionLog,
        dispatcher: ActionDispatcher,
        transport: Transport,
        version: str,
        *,
        clock: Clock | None = None,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self.storage = storage
        self.log = log
        self.dispatcher = dispatcher
        self.transport = transport
        self.version = version
        self.clock = clock or SystemClock()
        self.logger = logger or get_runtime_logger()

    def last_active(self) -> int | None:
        raw = self.storage.read_text(ACTIVE_FILE)
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise StorageReadError(ACTIVE_FILE, f"not an integer timestamp: {raw!r}") from exc

    def is_due(self, now: int) -> bool:
        marker = self.last_active()
        if marker is None:
            return True
        return next_boundary(marker) < datetime.fromtimestamp(now / 1000)

    async def maybe_send_active(self) -> HeartbeatResult:
        try:
            now = self.clock.now()
            if not self.is_due(now):
                return HeartbeatResult(sent=False)

            self.log.record(ACTIVE)
            flush = await self.dispatcher.flush()
            try:
                await self.transport.send_analytics(ACTIVE, self.version)
            except Exception as exc:
                self.logger.failure("heartbeat.analytics_failed", exc, level="warning")
            self.storage.write_text(ACTIVE_FILE, str(now))
        except Exception as exc:
            self.logger.failure("heartbeat.failed", exc)
            try:
                self.storage.delete(ACTIVE_FILE)
            except OSError as delete_exc:
                self.logger.failure("heartbeat.reset_failed", delete_exc)
            return HeartbeatResult(sent=False, error=exc)

        self.logger.info("heartbeat.sent", at=now, delivered=flush.ok)
        return HeartbeatResult(sent=True, flush=flush)
