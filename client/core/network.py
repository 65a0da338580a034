from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Dict, List, Optional, Tuple

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed

from client.config import CLIENT_CONFIG
from shared.protocol import framing
from shared.protocol.commands import OpCode, is_implemented
from shared.protocol.errors import (
    ConnectionFailedError,
    MalformedReplyError,
    NotConnectedError,
    NotImplementedByProtocolError,
    ReplyTimeoutError,
    RequestCancelledError,
)
from shared.protocol.messages import Command, Reply

from .connection import ConnectionContext
from .router import FrameRouter
from .state import ConnectionState

logger = logging.getLogger(__name__)


class NetworkClient:
    """Websocket client that owns the connection lifecycle and runs request cycles."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.config = config or CLIENT_CONFIG
        self.host: str = self.config["host"]
        self.port: int = int(self.config["port"])
        self.close_timeout: float = float(self.config["close_timeout"])
        self.request_timeout: float = float(self.config["request_timeout"])
        self.max_message_size: int = int(self.config["max_message_size"])

        self.state = ConnectionState.DISCONNECTED
        self.device: Optional[str] = None
        self._ctx: Optional[ConnectionContext] = None
        self._lifecycle_lock = asyncio.Lock()
        self._teardown: Optional[asyncio.Future] = None

    @property
    def endpoint(self) -> str:
        return f"ws://{self.host}:{self.port}"

    @property
    def connected(self) -> bool:
        return self.state >= ConnectionState.CONNECTED

    @property
    def attached(self) -> bool:
        return self.state is ConnectionState.ATTACHED

    async def connect(self, endpoint: Optional[str] = None) -> None:
        async with self._lifecycle_lock:
            if self.connected:
                return
            uri = endpoint or self.endpoint
            self.state = ConnectionState.CONNECTING
            websocket = None
            try:
                websocket = await ws_connect(
                    uri,
                    close_timeout=self.close_timeout,
                    max_size=self.max_message_size,
                )
                ctx = ConnectionContext(websocket=websocket, endpoint=uri)
                ctx.router_task = asyncio.create_task(FrameRouter(ctx).run(), name="snes-frame-router")
            except Exception as exc:
                logger.warning("Connect to %s failed: %s", uri, exc)
                if websocket is not None:
                    await websocket.close()
                self.state = ConnectionState.DISCONNECTED
                raise ConnectionFailedError(f"Could not connect to {uri}: {exc}") from exc
            except asyncio.CancelledError:
                self.state = ConnectionState.DISCONNECTED
                raise

            self._ctx = ctx
            ctx.router_task.add_done_callback(lambda _task: self._on_router_exit(ctx))
            self.state = ConnectionState.CONNECTED
            logger.info("Connected to %s", uri)

    async def disconnect(self) -> None:
        async with self._lifecycle_lock:
            ctx = self._ctx
            if ctx is None:
                self.state = ConnectionState.DISCONNECTED
                return
            self._ctx = None
            ctx.close_queues()
            # Bounded by close_timeout; the socket is aborted if the peer never acknowledges.
            await ctx.websocket.close()
            if ctx.router_task and not ctx.router_task.done():
                ctx.router_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await ctx.router_task
            self.state = ConnectionState.DISCONNECTED
            self.device = None
            logger.info("Disconnected from %s", ctx.endpoint)

    async def attach(self, device: str) -> None:
        await self.request(Command.build(OpCode.ATTACH, [device]), requires=ConnectionState.CONNECTED)
        self.state = ConnectionState.ATTACHED
        self.device = device
        logger.info("Attached to %s", device)

    def require(self, minimum: ConnectionState) -> ConnectionContext:
        ctx = self._ctx
        if ctx is None or ctx.closing.is_set() or self.state < minimum:
            raise NotConnectedError(f"{minimum.name.lower()} state required, currently {self.state.name.lower()}")
        return ctx

    async def request(
        self,
        command: Command,
        payload: Optional[bytes] = None,
        replies: int = 0,
        payloads: int = 0,
        requires: ConnectionState = ConnectionState.CONNECTED,
    ) -> Tuple[List[Reply], List[bytes]]:
        """
        Run one full request cycle under the gate.

        Sends the command (and `payload` as a binary frame right after it, if
        given), then drains exactly `replies` items from the reply queue and
        `payloads` items from the payload queue before releasing the gate.
        """
        if not is_implemented(command.opcode):
            raise NotImplementedByProtocolError(f"{command.opcode_text} is not supported by this protocol version")
        ctx = self.require(requires)
        message = framing.encode_command(command)

        async with ctx.gate:
            try:
                try:
                    await ctx.websocket.send(message)
                    logger.debug("Sent %s", message)
                    if payload is not None:
                        await ctx.websocket.send(bytes(payload))
                        logger.debug("Sent payload of %s bytes", len(payload))
                except ConnectionClosed as exc:
                    raise RequestCancelledError(f"Connection lost during send: {exc}") from exc

                received_replies, reply_error = await self._drain(ctx, ctx.replies, replies)
                received_payloads, payload_error = await self._drain(ctx, ctx.payloads, payloads)
            except asyncio.CancelledError:
                # Items still owed to this cycle would be read by the next one.
                logger.warning("%s cancelled mid-cycle, closing connection to %s", command.opcode_text, ctx.endpoint)
                self._abandon(ctx)
                raise
        if reply_error or payload_error:
            raise reply_error or payload_error
        return received_replies, received_payloads

    async def _drain(
        self, ctx: ConnectionContext, queue: asyncio.Queue, count: int
    ) -> Tuple[List[Any], Optional[MalformedReplyError]]:
        items: List[Any] = []
        error: Optional[MalformedReplyError] = None
        for _ in range(count):
            try:
                items.append(await ctx.take(queue, self.request_timeout or None))
            except MalformedReplyError as exc:
                # Keep draining so the next request does not pick up this one's leftovers.
                error = error or exc
            except asyncio.TimeoutError as exc:
                logger.error("No response from %s after %ss, closing connection", ctx.endpoint, self.request_timeout)
                await self.disconnect()
                raise ReplyTimeoutError(f"No response within {self.request_timeout}s") from exc
        return items, error

    def _abandon(self, ctx: ConnectionContext) -> None:
        ctx.close_queues()
        if ctx is self._ctx:
            self._teardown = asyncio.ensure_future(self.disconnect())

    def _on_router_exit(self, ctx: ConnectionContext) -> None:
        if ctx is not self._ctx:
            return
        logger.warning("Connection to %s closed by peer", ctx.endpoint)
        self._ctx = None
        self.state = ConnectionState.DISCONNECTED
        self.device = None
