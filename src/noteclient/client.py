"""Startup sequence and session action recording."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from noteclient.actions import INSTALLED, ActionLog
from noteclient.config.models import ClientSettings
from noteclient.dispatcher import ActionDispatcher, FlushResult
from noteclient.heartbeat import Heartbeat, HeartbeatResult
from noteclient.identity import ClientIdentity
from noteclient.migrations import MigrationRegistry, UpgradeReport, VersionUpgradeRunner
from noteclient.runtime_logging import RuntimeLogger, get_runtime_logger
from noteclient.storage import Clock, StateStorage, SystemClock
from noteclient.transport import HttpTransport, Transport
from noteclient.upgrades import DEFAULT_REGISTRY
from noteclient.version import __version__
from noteclient.versioning import installed_versions, split_versioned_name

Recorder = Callable[[str], Awaitable[FlushResult | None]]


@dataclass(slots=True)
class StartupReport:
    first_run: bool
    upgrade: UpgradeReport | None
    heartbeat: HeartbeatResult | None


class NoteClient:
    def __init__(
        self,
        settings: ClientSettings,
        *,
        current_version: str = __version__,
        extension_path: Path | None = None,
        transport: Transport | None = None,
        clock: Clock | None = None,
        registry: MigrationRegistry | None = None,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self.settings = settings
        self.current_version = current_version
        self.extension_path = extension_path
        self.clock = clock or SystemClock()
        self.logger = logger or get_runtime_logger()
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.startup: StartupReport | None = None

        self.storage = StateStorage(settings.state_path())
        self.identity = ClientIdentity(self.storage, logger=self.logger)
        self.actions = ActionLog(self.storage, clock=self.clock, logger=self.logger)
        self.transport = transport or HttpTransport(
            settings.collector,
            settings.analytics,
            self.identity.get_id,
        )
        self.dispatcher = ActionDispatcher(
            self.actions,
            self.identity,
            self.transport,
            current_version,
            logger=self.logger,
        )
        self.heartbeat = Heartbeat(
            self.storage,
            self.actions,
            self.dispatcher,
            self.transport,
            current_version,
            clock=self.clock,
            logger=self.logger,
        )

    def extensions_dir(self) -> Path | None:
        if self.settings.extension.extensions_dir:
            return Path(self.settings.extension.extensions_dir)
        if self.extension_path is not None:
            return self.extension_path.parent
        return None

    def upgrade_runner(self) -> VersionUpgradeRunner:
        return VersionUpgradeRunner(
            self.registry,
            self.storage,
            self.current_version,
            extension_path=self.extension_path,
            logger=self.logger,
        )

    def extension_identifier(self) -> str | None:
        if self.settings.extension.identifier:
            return self.settings.extension.identifier
        if self.extension_path is None:
            return None
        parts = split_versioned_name(self.extension_path.name)
        return parts[0] if parts else None

    def run_upgrades(self) -> UpgradeReport | None:
        extensions_dir = self.extensions_dir()
        identifier = self.extension_identifier()
        if extensions_dir is None or identifier is None:
            self.logger.debug(
                "upgrade.skipped",
                extensions_dir=str(extensions_dir) if extensions_dir else None,
                identifier=identifier,
            )
            return None
        try:
            installed = installed_versions(extensions_dir, identifier, self.logger)
        except OSError as exc:
            self.logger.failure("upgrade.listing_failed", exc, directory=str(extensions_dir))
            return None
        return self.upgrade_runner().run(installed)

    async def start(self) -> StartupReport:
        try:
            first_run = self.storage.ensure_root()
            if first_run:
                self.identity.ensure_id()
                self.actions.stage({INSTALLED: [self.clock.now()]})
                self.logger.info("client.first_run", state_dir=str(self.storage.root))
        except OSError as exc:
            self.logger.failure("client.state_unavailable", exc, state_dir=str(self.storage.root))
            self.startup = StartupReport(first_run=False, upgrade=None, heartbeat=None)
            return self.startup

        upgrade = self.run_upgrades()
        try:
            self.identity.ensure_id()
        except OSError as exc:
            self.logger.failure("identity.write_failed", exc)

        heartbeat = None
        if self.settings.enabled:
            heartbeat = await self.heartbeat.maybe_send_active()
        self.startup = StartupReport(first_run=first_run, upgrade=upgrade, heartbeat=heartbeat)
        return self.startup

    async def record(self, action: str) -> FlushResult | None:
        """Record ``action`` and try to deliver everything pending."""
        try:
            self.actions.record(action)
        except OSError as exc:
            self.logger.failure("actions.record_failed", exc, action=action)
            return None
        if not self.settings.enabled:
            return None
        return await self.dispatcher.flush()

    def recorder(self) -> Recorder:
        return self.record

    async def flush(self) -> FlushResult:
        return await self.dispatcher.flush()


async def init_client(
    settings: ClientSettings,
    *,
    current_version: str = __version__,
    extension_path: Path | None = None,
    transport: Transport | None = None,
    clock: Clock | None = None,
    registry: MigrationRegistry | None = None,
    logger: RuntimeLogger | None = None,
) -> NoteClient:
    client = NoteClient(
        settings,
        current_version=current_version,
        extension_path=extension_path,
        transport=transport,
        clock=clock,
        registry=registry,
        logger=logger,
    )
    await client.start()
    return client
