"""Settings schema for noteclient."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from noteclient.paths import state_root

DEFAULT_ANALYTICS_URL = "https://www.google-analytics.com/collect"


class ExtensionSettings(BaseModel):
    identifier: str | None = Field(
        default=None,
        description="Publisher-qualified id prefixing installed extension directories; "
        "taken from the running extension's directory when unset",
    )
    extensions_dir: str | None = Field(default=None)

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("identifier must not be empty")
        return value


class CollectorSettings(BaseModel):
    url: str | None = Field(default=None, description="Endpoint receiving action events")
    timeout_seconds: float = Field(default=2.5, gt=0, le=60)


class AnalyticsSettings(BaseModel):
    url: str = Field(default=DEFAULT_ANALYTICS_URL)
    tracking_id: str | None = Field(default=None)
    protocol_version: int = Field(default=1, ge=1)


class ClientSettings(BaseModel):
    schema_version: int = Field(default=1)
    enabled: bool = Field(default=True)
    state_dir: str | None = Field(default=None)
    extension: ExtensionSettings = Field(default_factory=ExtensionSettings)
    collector: CollectorSettings = Field(default_factory=CollectorSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)

    @field_validator("state_dir")
    @classmethod
    def validate_state_dir(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return str(Path(value).expanduser())

    def state_path(self) -> Path:
        if self.state_dir is None:
            return state_root()
        return Path(self.state_dir)
