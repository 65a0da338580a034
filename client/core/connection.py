from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

from shared.protocol.errors import ProtocolError, RequestCancelledError

from .gate import RequestGate

# Sticky end-of-stream marker; a consumer that takes it puts it back for the next one.
QUEUE_CLOSED = object()


@dataclass
class ConnectionContext:
    """Everything owned by one live connection, created on connect and closed on disconnect."""

    websocket: Any  # websockets.asyncio.client.ClientConnection
    endpoint: str
    closing: asyncio.Event = field(default_factory=asyncio.Event)
    replies: asyncio.Queue = field(default_factory=asyncio.Queue)
    payloads: asyncio.Queue = field(default_factory=asyncio.Queue)
    gate: RequestGate = field(init=False)
    router_task: Optional[asyncio.Task] = None

    def __post_init__(self) -> None:
        self.gate = RequestGate(self.closing)

    def close_queues(self) -> None:
        if self.closing.is_set():
            return
        self.closing.set()
        self.replies.put_nowait(QUEUE_CLOSED)
        self.payloads.put_nowait(QUEUE_CLOSED)

    async def take(self, queue: asyncio.Queue, timeout: Optional[float] = None) -> Any:
        """Next item from `queue`; raises TimeoutError, RequestCancelledError or the queued error."""
        item = await asyncio.wait_for(queue.get(), timeout)
        if item is QUEUE_CLOSED:
            queue.put_nowait(QUEUE_CLOSED)
            raise RequestCancelledError("Connection closed while waiting for a response")
        if isinstance(item, ProtocolError):
            raise item
        return item


__all__ = ["ConnectionContext", "QUEUE_CLOSED"]
