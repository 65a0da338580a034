from __future__ import annotations

import asyncio
import logging

from client.config import CLIENT_CONFIG, load_config
from client.features import Snes
from client.ui import SnesCLI


async def run_client() -> None:
    load_config()
    logging.basicConfig(level=CLIENT_CONFIG["log_level"])
    snes = Snes()
    cli = SnesCLI(snes)

    await snes.connect()
    try:
        await cli.run()
    finally:
        await snes.disconnect()


def main() -> None:
    asyncio.run(run_client())


if __name__ == "__main__":
    main()
