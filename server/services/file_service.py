from __future__ import annotations

import logging

from server.core.connection import ConnectionContext
from server.core.router import HandlerResult
from shared.protocol.errors import InvalidCommandError
from shared.protocol.messages import Command
from shared.utils.common import parse_hex, to_hex

from .device_service import operands

logger = logging.getLogger(__name__)


class FileService:
    """SD card opcodes."""

    async def handle_get_file(self, command: Command, ctx: ConnectionContext) -> HandlerResult:
        data = ctx.device.get_file(operands(command, 1)[0])
        return HandlerResult(results=[to_hex(len(data))], payload=data)

    async def handle_put_file(self, command: Command, ctx: ConnectionContext) -> None:
        device = ctx.device
        path, size = operands(command, 2)[:2]
        data = await ctx.receive_payload()
        if len(data) != parse_hex(size):
            raise InvalidCommandError(f"PutFile announced {size} bytes, received {len(data)}")
        device.put_file(path, data)
        logger.info("Stored %s (%s bytes)", path, len(data))

    async def handle_list(self, command: Command, ctx: ConnectionContext) -> HandlerResult:
        entries = ctx.device.list(operands(command, 1)[0])
        return HandlerResult(results=[value for entry in entries for value in entry])

    async def handle_remove(self, command: Command, ctx: ConnectionContext) -> None:
        ctx.device.remove(operands(command, 1)[0])

    async def handle_rename(self, command: Command, ctx: ConnectionContext) -> None:
        path, new_name = operands(command, 2)[:2]
        ctx.device.rename(path, new_name)

    async def handle_make_dir(self, command: Command, ctx: ConnectionContext) -> None:
        ctx.device.make_dir(operands(command, 1)[0])
