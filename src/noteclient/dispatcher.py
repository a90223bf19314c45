"""Drains the action log into the transport."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from noteclient.actions import INSTALLED, ActionLog
from noteclient.events import ActionEvent, ClientInfoEvent, os_info
from noteclient.identity import ClientIdentity
from noteclient.runtime_logging import RuntimeLogger, get_runtime_logger
from noteclient.transport import Transport


@dataclass(slots=True)
class FlushResult:
    delivered: int
    pending: int
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ActionDispatcher:
    """Delivers pending actions at-least-once.

    A flush is all-or-nothing on disk: any failure writes the untouched
    pending map back, so events already delivered in that attempt are sent
    again next time.
    """

    def __init__(
        self,
        log: ActionLog,
        identity: ClientIdentity,
        transport: Transport,
        version: str,
        *,
        info_provider: Callable[[], dict[str, str]] = os_info,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self.log = log
        self.identity = identity
        self.transport = transport
        self.version = version
        self.info_provider = info_provider
        self.logger = logger or get_runtime_logger()

    async def flush(self) -> FlushResult:
        actions = self.log.load_or_empty()
        if not actions:
            return FlushResult(delivered=0, pending=0)

        pending = sum(len(stamps) for stamps in actions.values())
        delivered = 0
        try:
            cid = self.identity.get_id()
            for action, stamps in actions.items():
                if action == INSTALLED:
                    if not stamps:
                        continue
                    event = ClientInfoEvent(
                        cid=cid,
                        info=self.info_provider(),
                        timestamp=stamps[0],
                        version=self.version,
                    )
                    await self.transport.post_event(event.to_payload())
                    delivered += 1
                    continue
                for stamp in stamps:
                    event = ActionEvent(cid=cid, action=action, timestamp=stamp, version=self.version)
                    await self.transport.post_event(event.to_payload())
                    delivered += 1
        except Exception as exc:
            self.logger.failure("dispatch.failed", exc, level="warning", delivered=delivered, pending=pending)
            try:
                self.log.stage(actions)
            except OSError as stage_exc:
                self.logger.failure("dispatch.restage_failed", stage_exc)
            return FlushResult(delivered=delivered, pending=pending, error=exc)

        try:
            self.log.clear()
        except OSError as exc:
            self.logger.failure("dispatch.clear_failed", exc)
            return FlushResult(delivered=delivered, pending=pending, error=exc)

        self.logger.info("dispatch.flushed", delivered=delivered)
        return FlushResult(delivered=delivered, pending=0)
