from __future__ import annotations

from client.core.network import NetworkClient
from client.core.state import ConnectionState
from shared.protocol.commands import OpCode
from shared.protocol.errors import NotImplementedByProtocolError
from shared.protocol.messages import Command


class ControlManager:
    """Console control opcodes. None of them produces a reply."""

    def __init__(self, network: NetworkClient) -> None:
        self.network = network

    async def boot(self, rom_path: str) -> None:
        await self._send(Command.build(OpCode.BOOT, [rom_path]))

    async def menu(self) -> None:
        await self._send(Command.build(OpCode.MENU))

    async def reset(self) -> None:
        await self._send(Command.build(OpCode.RESET))

    async def binary(self) -> None:
        raise NotImplementedByProtocolError("Binary is not supported by this protocol version")

    async def stream(self) -> None:
        raise NotImplementedByProtocolError("Stream is not supported by this protocol version")

    async def fence(self) -> None:
        raise NotImplementedByProtocolError("Fence is not supported by this protocol version")

    async def _send(self, command: Command) -> None:
        await self.network.request(command, requires=ConnectionState.ATTACHED)
