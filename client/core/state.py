from __future__ import annotations

from enum import IntEnum


class ConnectionState(IntEnum):
    """Lifecycle of one client connection; ordered so `state >= required` reads naturally."""

    DISCONNECTED = 0
    CONNECTING = 1
    CONNECTED = 2
    ATTACHED = 3


__all__ = ["ConnectionState"]
