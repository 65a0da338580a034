from __future__ import annotations

from typing import Any, Dict, Optional

from .connection import ConnectionContext


class ConnectionManager:
    """Tracks active client connections and the device each one is attached to."""

    def __init__(self) -> None:
        self._by_socket: Dict[Any, ConnectionContext] = {}

    def register(self, websocket: Any, ctx: ConnectionContext) -> None:
        self._by_socket[websocket] = ctx

    def unregister(self, websocket: Any) -> Optional[ConnectionContext]:
        return self._by_socket.pop(websocket, None)

    def __len__(self) -> int:
        return len(self._by_socket)
