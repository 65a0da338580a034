from __future__ import annotations

from server.core.connection import ConnectionContext
from server.core.router import HandlerResult
from shared.protocol.errors import InvalidCommandError
from shared.protocol.messages import Command
from shared.utils.common import parse_hex, to_hex

from .device_service import operands


class MemoryService:
    async def handle_get_address(self, command: Command, ctx: ConnectionContext) -> HandlerResult:
        device = ctx.device
        offset, size = (parse_hex(value) for value in operands(command, 2)[:2])
        data = device.read(offset, size)
        return HandlerResult(results=[to_hex(len(data))], payload=data)

    async def handle_put_address(self, command: Command, ctx: ConnectionContext) -> None:
        device = ctx.device
        offset, size = (parse_hex(value) for value in operands(command, 2)[:2])
        data = await ctx.receive_payload()
        if len(data) != size:
            raise InvalidCommandError(f"PutAddress announced {size} bytes, received {len(data)}")
        device.write(offset, data)

    async def handle_put_ips(self, command: Command, ctx: ConnectionContext) -> None:
        device = ctx.device
        name, size = operands(command, 2)[:2]
        data = await ctx.receive_payload()
        if len(data) != parse_hex(size):
            raise InvalidCommandError(f"PutIPS announced {size} bytes, received {len(data)}")
        device.apply_patch(name, data)
