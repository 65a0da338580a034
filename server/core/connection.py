from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from server.storage.memory import InMemoryDevice
from shared.protocol.errors import InvalidCommandError


@dataclass
class ConnectionContext:
    websocket: Any  # websockets.asyncio.server.ServerConnection
    peername: str
    client_name: Optional[str] = None
    device: Optional[InMemoryDevice] = None

    def mark_attached(self, device: InMemoryDevice) -> None:
        self.device = device

    def is_attached(self) -> bool:
        return self.device is not None

    async def receive_payload(self) -> bytes:
        """Binary frame that follows an upload command."""
        message = await self.websocket.recv()
        if isinstance(message, str):
            raise InvalidCommandError("Expected a binary frame after the upload command")
        return message
