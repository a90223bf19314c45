"""Version-range upgrade sequencing over a static step registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from semver import Version

from noteclient.errors import MigrationStepError
from noteclient.runtime_logging import RuntimeLogger, get_runtime_logger
from noteclient.storage import StateStorage
from noteclient.versioning import compare_versions, is_valid_version, parse_version, previous_version


@dataclass(slots=True)
class MigrationContext:
    state: StateStorage
    previous_version: str
    current_version: str
    extension_path: Path | None = None


MigrationFunc = Callable[[MigrationContext], None]


@dataclass(slots=True, frozen=True)
class MigrationStep:
    version: str
    name: str
    func: MigrationFunc


@dataclass(slots=True)
class StepOutcome:
    version: str
    name: str
    ok: bool
    error: MigrationStepError | None = None


@dataclass(slots=True)
class UpgradeReport:
    previous_version: str
    current_version: str
    upgraded: bool = False
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def failed(self) -> list[StepOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


class MigrationRegistry:
    """Explicit table of upgrade steps keyed by target version."""

    def __init__(self, steps: Iterable[MigrationStep] = ()) -> None:
        self._steps: dict[Version, MigrationStep] = {}
        for step in steps:
            self.add(step)

    def add(self, step: MigrationStep) -> None:
        if not is_valid_version(step.version):
            raise ValueError(f"Invalid migration version: {step.version!r}")
        key = parse_version(step.version)
        if key in self._steps:
            existing = self._steps[key]
            raise ValueError(f"Version {step.version} already registered by {existing.name}")
        self._steps[key] = step

    def register(self, version: str, name: str | None = None) -> Callable[[MigrationFunc], MigrationFunc]:
        def decorator(func: MigrationFunc) -> MigrationFunc:
            self.add(MigrationStep(version=version, name=name or func.__name__, func=func))
            return func

        return decorator

    def steps(self) -> list[MigrationStep]:
        return [self._steps[key] for key in sorted(self._steps)]

    def between(self, lower: str, upper: str) -> list[MigrationStep]:
        """Steps in the half-open range ``(lower, upper]``, ascending."""
        low = parse_version(lower)
        high = parse_version(upper)
        return [self._steps[key] for key in sorted(self._steps) if low < key <= high]

    def __len__(self) -> int:
        return len(self._steps)


class VersionUpgradeRunner:
    def __init__(
        self,
        registry: MigrationRegistry,
        state: StateStorage,
        current_version: str,
        *,
        extension_path: Path | None = None,
        stop_on_failure: bool = False,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self.registry = registry
        self.state = state
        self.current_version = current_version
        self.extension_path = extension_path
        self.stop_on_failure = stop_on_failure
        self.logger = logger or get_runtime_logger()

    def plan(self, installed: Iterable[str]) -> tuple[str, list[MigrationStep]]:
        """Previous version and the steps to run; nothing when versions are unusable."""
        if not is_valid_version(self.current_version):
            self.logger.warning("upgrade.invalid_version", version=self.current_version)
            return self.current_version, []

        usable: list[str] = []
        for version in installed:
            if is_valid_version(version):
                usable.append(version)
            else:
                self.logger.warning("upgrade.invalid_version", version=version)

        previous = previous_version(usable, self.current_version)
        if compare_versions(previous, self.current_version) == 0:
            return previous, []
        return previous, self.registry.between(previous, self.current_version)

    def run(self, installed: Iterable[str]) -> UpgradeReport:
        previous, steps = self.plan(installed)
        report = UpgradeReport(previous_version=previous, current_version=self.current_version)
        if previous == self.current_version or compare_versions(previous, self.current_version) == 0:
            return report
        report.upgraded = True

        context = MigrationContext(
            state=self.state,
            previous_version=previous,
            current_version=self.current_version,
            extension_path=self.extension_path,
        )
        for step in steps:
            try:
                step.func(context)
            except Exception as exc:
                error = MigrationStepError(step.version, step.name, exc)
                report.outcomes.append(StepOutcome(step.version, step.name, ok=False, error=error))
                self.logger.failure("upgrade.step_failed", exc, version=step.version, step=step.name)
                if self.stop_on_failure:
                    break
                continue
            report.outcomes.append(StepOutcome(step.version, step.name, ok=True))
            self.logger.info("upgrade.step_applied", version=step.version, step=step.name)

        self.logger.info(
            "upgrade.completed",
            previous=previous,
            current=self.current_version,
            applied=len(report.outcomes) - len(report.failed),
            failed=len(report.failed),
        )
        return report
