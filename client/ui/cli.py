from __future__ import annotations

import asyncio
import logging

from client.features import Snes
from client.features.files import DIRECTORY
from shared.protocol.errors import ProtocolError
from shared.utils.common import parse_hex

logger = logging.getLogger(__name__)


class SnesCLI:
    """Simple async console driving the Snes façade."""

    def __init__(self, snes: Snes) -> None:
        self.snes = snes

    async def run(self) -> None:
        logger.info("CLI ready. Type 'help' for commands.")
        loop = asyncio.get_event_loop()
        while True:
            cmd = await loop.run_in_executor(None, input, "> ")
            parts = cmd.strip().split()
            if not parts:
                continue
            if parts[0] == "quit":
                break
            try:
                await self._dispatch(parts)
            except ProtocolError as exc:
                logger.warning("%s failed: %s", parts[0], exc)
                print(f"{parts[0]} failed: {exc.message}")
            except (OSError, ValueError) as exc:
                print(f"{parts[0]} failed: {exc}")

    async def _dispatch(self, parts: list[str]) -> None:
        snes = self.snes
        match parts:
            case ["help"]:
                self._show_help()
            case ["devices"]:
                print("Devices:", await snes.get_device_list())
            case ["attach", device]:
                firmware = await snes.attach(device)
                print(f"Attached to {device}, firmware {firmware}")
            case ["version"]:
                print("Server version:", await snes.devices.app_version())
            case ["info"]:
                print("Info:", await snes.devices.info())
            case ["boot", path]:
                await snes.boot_rom(path)
            case ["menu"]:
                await snes.control.menu()
            case ["reset"]:
                await snes.control.reset()
            case ["read", address, size]:
                data = await snes.memory.get_address(parse_hex(address), int(size, 0))
                print(data.hex(" "))
            case ["ls", path]:
                types, names = await snes.list(path)
                for entry_type, name in zip(types, names):
                    print(f"{'d' if entry_type == DIRECTORY else '-'} {name}")
            case ["get", remote, local]:
                saved = await snes.move_from_snes(remote, local)
                print(f"Saved {remote} to {saved}")
            case ["put", local, remote]:
                await snes.move_to_snes(local, remote)
                print(f"Uploaded {local} to {remote}")
            case ["rm", path]:
                await snes.remove(path)
            case ["mv", path, new_name]:
                await snes.files.rename(path, new_name)
            case ["mkdir", path]:
                await snes.make_dir(path)
            case _:
                print("Unknown command, type 'help'")

    def _show_help(self) -> None:
        print(
            "Commands: devices, attach <device>, version, info, boot <path>, menu, reset, "
            "read <hex address> <size>, ls <dir>, get <remote> <local>, put <local> <remote>, "
            "rm <path>, mv <path> <new name>, mkdir <dir>, quit"
        )
