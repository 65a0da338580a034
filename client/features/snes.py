from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from client.core.network import NetworkClient

from .control import ControlManager
from .devices import DeviceManager
from .files import FileManager
from .memory import MemoryManager

logger = logging.getLogger(__name__)


class Snes:
    """
    Convenience layer over the opcode managers.

    Usage::

        async with Snes() as snes:
            devices = await snes.get_device_list()
            firmware = await snes.attach(devices[0])
            await snes.move_to_snes("game.sfc", "/roms/game.sfc")
    """

    def __init__(self, network: Optional[NetworkClient] = None, config: Optional[Dict[str, Any]] = None) -> None:
        self.network = network or NetworkClient(config)
        self.devices = DeviceManager(self.network)
        self.control = ControlManager(self.network)
        self.memory = MemoryManager(self.network)
        self.files = FileManager(self.network)

    async def __aenter__(self) -> "Snes":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    async def connect(self, endpoint: Optional[str] = None) -> None:
        await self.network.connect(endpoint)
        await self.devices.name()

    async def disconnect(self) -> None:
        await self.network.disconnect()

    async def get_device_list(self) -> List[str]:
        return await self.devices.device_list()

    async def attach(self, device: str) -> str:
        """Attach to `device` and return its firmware version."""
        await self.devices.attach(device)
        info = await self.devices.info()
        return info[0] if info else ""

    async def boot_rom(self, rom_path: str) -> None:
        await self.control.boot(rom_path)

    async def move_from_snes(self, snes_path: str, local_path: Union[str, Path]) -> Path:
        data = await self.files.get_file(snes_path)
        local_path = Path(local_path)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        local_path.write_bytes(data)
        return local_path

    async def move_to_snes(self, local_path: Union[str, Path], snes_path: str) -> None:
        local_path = Path(local_path)
        if not local_path.exists():
            raise FileNotFoundError(local_path)
        await self.files.put_file(snes_path, local_path.read_bytes())

    async def list(self, dir_path: str) -> Tuple[List[str], List[str]]:
        return await self.files.list(dir_path)

    async def make_dir(self, dir_path: str) -> None:
        await self.files.make_dir(dir_path)

    async def remove(self, path: str) -> None:
        await self.files.remove(path)
