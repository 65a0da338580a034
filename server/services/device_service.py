from __future__ import annotations

import logging
from typing import Dict, List

from server.core.connection import ConnectionContext
from server.core.router import HandlerResult
from server.storage.memory import InMemoryDevice
from shared.protocol.errors import InvalidCommandError
from shared.protocol.messages import Command

logger = logging.getLogger(__name__)


def operands(command: Command, count: int) -> List[str]:
    values = list(command.operands or ())
    if len(values) < count:
        raise InvalidCommandError(f"{command.opcode_text} needs {count} operand(s), got {len(values)}")
    return values


class DeviceService:
    """Connection and console opcodes."""

    def __init__(self, devices: Dict[str, InMemoryDevice], app_version: str = "7.42.0") -> None:
        self.devices = devices
        self.app_version = app_version

    async def handle_device_list(self, command: Command, ctx: ConnectionContext) -> HandlerResult:
        return HandlerResult(results=list(self.devices))

    async def handle_attach(self, command: Command, ctx: ConnectionContext) -> None:
        name = operands(command, 1)[0]
        device = self.devices.get(name)
        if device is None:
            raise InvalidCommandError(f"Unknown device {name}")
        ctx.mark_attached(device)
        logger.info("%s attached to %s", ctx.client_name or ctx.peername, name)

    async def handle_app_version(self, command: Command, ctx: ConnectionContext) -> HandlerResult:
        return HandlerResult(results=[self.app_version])

    async def handle_name(self, command: Command, ctx: ConnectionContext) -> None:
        ctx.client_name = operands(command, 1)[0]

    async def handle_info(self, command: Command, ctx: ConnectionContext) -> HandlerResult:
        return HandlerResult(results=ctx.device.info())

    async def handle_boot(self, command: Command, ctx: ConnectionContext) -> None:
        ctx.device.boot(operands(command, 1)[0])

    async def handle_menu(self, command: Command, ctx: ConnectionContext) -> None:
        ctx.device.menu()

    async def handle_reset(self, command: Command, ctx: ConnectionContext) -> None:
        ctx.device.reset()
