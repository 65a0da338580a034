from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from server.config import SERVER_CONFIG, load_server_config
from server.core import CommandRouter, ConnectionManager, SocketServer
from server.services import DeviceService, FileService, MemoryService
from server.storage import InMemoryDevice
from shared.protocol.commands import OpCode


def build_server(config: Optional[Dict[str, Any]] = None) -> Tuple[SocketServer, Dict[str, InMemoryDevice]]:
    """Wire devices, services and router into a server that is ready to start()."""
    config = config or SERVER_CONFIG
    devices = {
        name.strip(): InMemoryDevice(name.strip(), memory_size=int(config["memory_size"]), firmware=config["firmware"])
        for name in str(config["devices"]).split(",")
        if name.strip()
    }
    device_service = DeviceService(devices, app_version=config["app_version"])
    memory_service = MemoryService()
    file_service = FileService()

    router = CommandRouter()
    router.register(OpCode.DEVICE_LIST, device_service.handle_device_list)
    router.register(OpCode.ATTACH, device_service.handle_attach)
    router.register(OpCode.APP_VERSION, device_service.handle_app_version)
    router.register(OpCode.NAME, device_service.handle_name)
    router.register(OpCode.INFO, device_service.handle_info)
    router.register(OpCode.BOOT, device_service.handle_boot)
    router.register(OpCode.MENU, device_service.handle_menu)
    router.register(OpCode.RESET, device_service.handle_reset)
    router.register(OpCode.GET_ADDRESS, memory_service.handle_get_address)
    router.register(OpCode.PUT_ADDRESS, memory_service.handle_put_address)
    router.register(OpCode.PUT_IPS, memory_service.handle_put_ips)
    router.register(OpCode.GET_FILE, file_service.handle_get_file)
    router.register(OpCode.PUT_FILE, file_service.handle_put_file)
    router.register(OpCode.LIST, file_service.handle_list)
    router.register(OpCode.REMOVE, file_service.handle_remove)
    router.register(OpCode.RENAME, file_service.handle_rename)
    router.register(OpCode.MAKE_DIR, file_service.handle_make_dir)

    server = SocketServer(
        config["host"],
        int(config["port"]),
        router,
        ConnectionManager(),
        max_message_size=int(config["max_message_size"]),
    )
    return server, devices


async def run_server() -> None:
    load_server_config()
    logging.basicConfig(level=SERVER_CONFIG["log_level"])

    server, _ = build_server()
    await server.start()
    try:
        await asyncio.Event().wait()  # keep running
    finally:
        await server.stop()


def main() -> None:
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
