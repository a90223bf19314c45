"""Anonymous client identifier."""

from __future__ import annotations

import secrets

from noteclient.errors import IdentityMissingError
from noteclient.runtime_logging import RuntimeLogger, get_runtime_logger
from noteclient.storage import ID_FILE, StateStorage

ID_BYTES = 10


class ClientIdentity:
    def __init__(self, storage: StateStorage, logger: RuntimeLogger | None = None) -> None:
        self.storage = storage
        self.logger = logger or get_runtime_logger()

    def ensure_id(self) -> str:
        existing = self.storage.read_text(ID_FILE)
        if existing and existing.strip():
            return existing.strip()

        client_id = secrets.token_hex(ID_BYTES)
        self.storage.write_text(ID_FILE, client_id)
        self.logger.info("identity.generated", cid=client_id)
        return client_id

    def get_id(self) -> str:
        existing = self.storage.read_text(ID_FILE)
        if not existing or not existing.strip():
            raise IdentityMissingError("Client id requested before ensure_id()")
        return existing.strip()
