"""Outbound event payloads."""

from __future__ import annotations

import platform
import socket
import sys
from dataclasses import asdict, dataclass
from typing import Any


def os_info() -> dict[str, str]:
    uname = platform.uname()
    return {
        "type": uname.system,
        "platform": sys.platform,
        "release": uname.release,
        "hostname": socket.gethostname(),
        "arch": uname.machine,
    }


@dataclass(slots=True)
class ActionEvent:
    cid: str
    action: str
    timestamp: int
    version: str

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ClientInfoEvent:
    """Reported once per installation in place of the bare "installed" action."""

    cid: str
    info: dict[str, str]
    timestamp: int
    version: str

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)
