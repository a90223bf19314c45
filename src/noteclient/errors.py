"""Error taxonomy for the telemetry and upgrade subsystem."""

from __future__ import annotations


class ClientError(Exception):
    """Base class for failures raised inside noteclient."""


class StorageReadError(ClientError):
    """A state file exists but its content cannot be parsed."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Unreadable state file {name!r}: {reason}")


class DeliveryError(ClientError):
    """The collector did not accept an event."""


class MigrationStepError(ClientError):
    """A registered upgrade step raised while executing."""

    def __init__(self, version: str, name: str, cause: BaseException) -> None:
        self.version = version
        self.name = name
        self.cause = cause
        super().__init__(f"Upgrade step {name} ({version}) failed: {cause}")


class IdentityMissingError(ClientError):
    """The client id was requested before one was generated."""


NotInitialized = IdentityMissingError
