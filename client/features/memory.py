from __future__ import annotations

import logging

from client.core.network import NetworkClient
from client.core.state import ConnectionState
from shared.protocol.commands import OpCode
from shared.protocol.errors import MalformedReplyError
from shared.protocol.messages import Command
from shared.utils.common import to_hex

logger = logging.getLogger(__name__)


class MemoryManager:
    """Reads and writes the device address space and applies IPS patches."""

    def __init__(self, network: NetworkClient) -> None:
        self.network = network

    async def get_address(self, offset: int, size: int) -> bytes:
        if size <= 0:
            raise ValueError("size must be positive")
        command = Command.build(OpCode.GET_ADDRESS, [to_hex(offset), to_hex(size)])
        _, payloads = await self.network.request(
            command, replies=1, payloads=1, requires=ConnectionState.ATTACHED
        )
        data = payloads[0]
        if len(data) != size:
            raise MalformedReplyError(f"Requested {size} bytes at {offset:#x}, received {len(data)}")
        return data

    async def put_address(self, offset: int, data: bytes) -> None:
        # TODO: accept several (offset, data) pairs and send them as one PutAddress.
        command = Command.build(OpCode.PUT_ADDRESS, [to_hex(offset), to_hex(len(data))])
        await self.network.request(command, payload=data, requires=ConnectionState.ATTACHED)
        logger.debug("Wrote %s bytes at %#x", len(data), offset)

    async def put_ips(self, name: str, data: bytes) -> None:
        """Apply an IPS patch; the name "hook" is reserved by the SD2SNES firmware."""
        command = Command.build(OpCode.PUT_IPS, [name, to_hex(len(data))])
        await self.network.request(command, payload=data, requires=ConnectionState.ATTACHED)
