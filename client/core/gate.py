from __future__ import annotations

import asyncio
import logging

from shared.protocol.errors import RequestCancelledError

logger = logging.getLogger(__name__)


class RequestGate:
    """
    Serializes whole request cycles (send, then drain the matching replies/payloads).

    The wire protocol carries no request identifiers, so replies can only be
    attributed by issue order; holding the gate for the full cycle keeps that
    order intact. Waiters are served first come, first served. A waiter that
    gets the gate after its connection started closing fails instead of
    touching the socket.

    Usage::

        async with ctx.gate:
            ...
    """

    def __init__(self, closing: asyncio.Event) -> None:
        self._lock = asyncio.Lock()
        self._closing = closing

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def __aenter__(self) -> "RequestGate":
        if self._closing.is_set():
            raise RequestCancelledError("Connection is closing")
        await self._lock.acquire()
        if self._closing.is_set():
            self._lock.release()
            logger.debug("Gate acquired after close was requested")
            raise RequestCancelledError("Connection closed while waiting for the request gate")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        self._lock.release()
        return False


__all__ = ["RequestGate"]
