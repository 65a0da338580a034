from __future__ import annotations

import logging
from typing import Any, Optional

from websockets.asyncio.server import Server, serve
from websockets.exceptions import ConnectionClosed

from shared.protocol import framing
from shared.protocol.commands import OpCode
from shared.protocol.constants import MAX_MESSAGE_SIZE
from shared.protocol.errors import ProtocolError
from shared.protocol.messages import Reply

from .connection import ConnectionContext
from .connection_manager import ConnectionManager
from .router import CommandRouter, HandlerResult

logger = logging.getLogger(__name__)

# Close code used when a command fails; a real usb2snes server drops the socket too.
COMMAND_FAILED = 1011


class SocketServer:
    def __init__(
        self,
        host: str,
        port: int,
        router: CommandRouter,
        connection_manager: ConnectionManager,
        max_message_size: int = MAX_MESSAGE_SIZE,
    ) -> None:
        self.host = host
        self.port = port
        self.router = router
        self.connection_manager = connection_manager
        self.max_message_size = max_message_size
        self._server: Optional[Server] = None

    async def start(self) -> None:
        self._server = await serve(self._handle_client, self.host, self.port, max_size=self.max_message_size)
        # Port 0 asks the OS for a free port; report the real one.
        self.port = self._server.sockets[0].getsockname()[1]
        logger.info("Server listening on %s:%s", self.host, self.port)

    async def stop(self) -> None:
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
            logger.info("Server stopped")

    async def _handle_client(self, websocket: Any) -> None:
        ctx = ConnectionContext(websocket=websocket, peername=str(websocket.remote_address))
        self.connection_manager.register(websocket, ctx)
        logger.info("Client %s connected (%s active)", ctx.peername, len(self.connection_manager))
        try:
            async for message in websocket:
                if isinstance(message, bytes):
                    logger.warning("Ignoring unexpected binary frame of %s bytes from %s", len(message), ctx.peername)
                    continue
                try:
                    command = framing.decode_command(message)
                    if command.opcode_text == OpCode.CLOSE:
                        break
                    if not self.router.handles(command.opcode_text):
                        logger.warning("No handler for %s from %s", command.opcode_text, ctx.peername)
                        continue
                    result = await self.router.dispatch(command, ctx)
                    if result:
                        await self._send(websocket, result)
                except (ProtocolError, OSError, ValueError) as exc:
                    logger.warning("Command failed for %s: %s", ctx.peername, exc)
                    await websocket.close(COMMAND_FAILED, str(exc)[:120])
                    break
        except ConnectionClosed:
            logger.info("Client %s connection reset", ctx.peername)
        finally:
            self.connection_manager.unregister(websocket)
            logger.info("Client %s disconnected", ctx.peername)

    async def _send(self, websocket: Any, result: HandlerResult) -> None:
        if result.results is not None:
            reply = Reply(results=result.results)
            await websocket.send(reply.model_dump_json(by_alias=True))
        if result.payload is not None:
            await websocket.send(result.payload)
