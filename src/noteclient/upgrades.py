"""Upgrade steps shipped with this release, keyed by the version introducing them."""

from __future__ import annotations

from noteclient.migrations import MigrationContext, MigrationRegistry
from noteclient.storage import ID_FILE

DEFAULT_REGISTRY = MigrationRegistry()

LEGACY_ID_FILE = "clientId"


@DEFAULT_REGISTRY.register("0.9.0")
def rename_legacy_client_id(context: MigrationContext) -> None:
    """Older releases kept the client id in ``clientId``."""
    state = context.state
    legacy = state.read_text(LEGACY_ID_FILE)
    if legacy is None:
        return
    if not state.exists(ID_FILE) and legacy.strip():
        state.write_text(ID_FILE, legacy.strip())
    state.delete(LEGACY_ID_FILE)
