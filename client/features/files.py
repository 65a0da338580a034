from __future__ import annotations

import logging
from typing import List, Tuple

from client.core.network import NetworkClient
from client.core.state import ConnectionState
from shared.protocol.commands import OpCode
from shared.protocol.errors import MalformedReplyError
from shared.protocol.messages import Command
from shared.utils.common import parse_hex, split_pairs, to_hex

logger = logging.getLogger(__name__)

# Entry types reported by List.
DIRECTORY = "0"


class FileManager:
    """Filesystem opcodes against the device's SD card."""

    def __init__(self, network: NetworkClient) -> None:
        self.network = network

    async def get_file(self, path: str) -> bytes:
        replies, payloads = await self.network.request(
            Command.build(OpCode.GET_FILE, [path]), replies=1, payloads=1, requires=ConnectionState.ATTACHED
        )
        data = payloads[0]
        announced = replies[0].first()
        if announced:
            try:
                size = parse_hex(announced)
            except ValueError as exc:
                raise MalformedReplyError(f"GetFile size {announced!r} is not hexadecimal") from exc
            if size != len(data):
                raise MalformedReplyError(f"GetFile announced {size} bytes, received {len(data)}")
        logger.info("Downloaded %s (%s bytes)", path, len(data))
        return data

    async def put_file(self, path: str, data: bytes) -> None:
        command = Command.build(OpCode.PUT_FILE, [path, to_hex(len(data))])
        await self.network.request(command, payload=data, requires=ConnectionState.ATTACHED)
        logger.info("Uploaded %s (%s bytes)", path, len(data))

    async def list(self, dir_path: str) -> Tuple[List[str], List[str]]:
        """Return (types, names) for the entries of `dir_path`, in the order the device lists them."""
        replies, _ = await self.network.request(
            Command.build(OpCode.LIST, [dir_path]), replies=1, requires=ConnectionState.ATTACHED
        )
        try:
            return split_pairs(replies[0].results)
        except ValueError as exc:
            raise MalformedReplyError(f"List reply for {dir_path}: {exc}") from exc

    async def remove(self, path: str) -> None:
        await self._send(Command.build(OpCode.REMOVE, [path]))

    async def rename(self, path: str, new_name: str) -> None:
        await self._send(Command.build(OpCode.RENAME, [path, new_name]))

    async def make_dir(self, dir_path: str) -> None:
        await self._send(Command.build(OpCode.MAKE_DIR, [dir_path]))

    async def _send(self, command: Command) -> None:
        await self.network.request(command, requires=ConnectionState.ATTACHED)
