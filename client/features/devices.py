from __future__ import annotations

import logging
from typing import List, Optional

from client.core.network import NetworkClient
from client.core.state import ConnectionState
from shared.protocol.commands import OpCode
from shared.protocol.messages import Command

logger = logging.getLogger(__name__)


class DeviceManager:
    """Connection-level opcodes: enumerate devices, attach, identify."""

    def __init__(self, network: NetworkClient, client_name: Optional[str] = None) -> None:
        self.network = network
        self.client_name = client_name or network.config.get("client_name", "")

    async def device_list(self) -> List[str]:
        replies, _ = await self.network.request(Command.build(OpCode.DEVICE_LIST), replies=1)
        devices = replies[0].results
        logger.info("Devices available: %s", devices)
        return devices

    async def attach(self, device: str) -> None:
        await self.network.attach(device)

    async def app_version(self) -> str:
        replies, _ = await self.network.request(Command.build(OpCode.APP_VERSION), replies=1)
        return replies[0].first()

    async def name(self, client_name: Optional[str] = None) -> None:
        name = client_name or self.client_name
        await self.network.request(Command.build(OpCode.NAME, [name]))

    async def info(self) -> List[str]:
        """Firmware version, version string, running ROM, then device flags."""
        replies, _ = await self.network.request(
            Command.build(OpCode.INFO), replies=1, requires=ConnectionState.ATTACHED
        )
        return replies[0].results
