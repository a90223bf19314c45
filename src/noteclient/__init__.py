"""Telemetry action queue and version upgrade runner for the note extension."""

from noteclient.client import NoteClient, init_client
from noteclient.version import __version__

__all__ = ["NoteClient", "init_client", "__version__"]
