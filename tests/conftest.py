from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional

import pytest
from websockets.exceptions import ConnectionClosedOK

import client.core.network as network_module
from client.config import DEFAULT_CONFIG
from client.core import NetworkClient
from server.config import DEFAULT_SERVER_CONFIG
from server.main import build_server

Message = List[Any]  # fragments of one logical message


class FakeWebSocket:
    """
    In-process peer standing in for a usb2snes server.

    `respond` maps a decoded command to the messages sent back, each message
    being a list of fragments (str for text, bytes for binary). Memory writes
    land in `memory` so uploads can be read back.
    """

    def __init__(self, memory_size: int = 0x1000, delay: float = 0.0) -> None:
        self.memory = bytearray(memory_size)
        self.delay = delay
        self.sent: List[Any] = []
        self.closed = False
        self.in_flight = 0
        self.max_in_flight = 0
        self.silent = False
        self.overrides: Dict[str, List[Message]] = {}
        self._incoming: asyncio.Queue = asyncio.Queue()
        self._pending_write: Optional[int] = None

    async def send(self, message: Any) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(message)
        if isinstance(message, bytes):
            if self._pending_write is not None:
                self.memory[self._pending_write : self._pending_write + len(message)] = message
                self._pending_write = None
            return
        command = json.loads(message)
        responses = self.respond(command)
        if self.silent or not responses:
            return
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.delay:
            asyncio.get_running_loop().call_later(self.delay, self._deliver, responses)
        else:
            self._deliver(responses)

    def respond(self, command: Dict[str, Any]) -> List[Message]:
        opcode = command["Opcode"]
        operands = command.get("Operands", [])
        if opcode in self.overrides:
            return self.overrides[opcode]
        if opcode == "DeviceList":
            return [[json.dumps({"Results": ["SD2SNES COM3", "EMU SNES9X"]})]]
        if opcode == "AppVersion":
            return [[json.dumps({"Results": ["7.42.0"]})]]
        if opcode == "Info":
            return [[json.dumps({"Results": ["1.11.0", "USB2SNES", "/sd2snes/menu.bin"]})]]
        if opcode == "GetAddress":
            offset, size = int(operands[0], 16), int(operands[1], 16)
            data = bytes(self.memory[offset : offset + size])
            return [[json.dumps({"Results": [f"{size:X}"]})], [data]]
        if opcode == "PutAddress":
            self._pending_write = int(operands[0], 16)
        return []

    def _deliver(self, responses: List[Message]) -> None:
        self.in_flight -= 1
        for message in responses:
            self._incoming.put_nowait(message)

    def push(self, *fragments: Any) -> None:
        """Deliver an unsolicited message."""
        self._incoming.put_nowait(list(fragments))

    async def recv_streaming(self):
        message = await self._incoming.get()
        if message is None:
            raise ConnectionClosedOK(None, None)
        for fragment in message:
            yield fragment

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._incoming.put_nowait(None)

    def commands(self) -> List[Dict[str, Any]]:
        return [json.loads(m) for m in self.sent if isinstance(m, str)]


@pytest.fixture
def fake_client(monkeypatch) -> Callable[..., tuple]:
    """Factory returning (NetworkClient, FakeWebSocket) wired through the real connect path."""

    def factory(**overrides: Any) -> tuple:
        ws = FakeWebSocket(delay=overrides.pop("delay", 0.0))

        async def fake_connect(uri: str, **kwargs: Any) -> FakeWebSocket:
            return ws

        monkeypatch.setattr(network_module, "ws_connect", fake_connect)
        config = {**DEFAULT_CONFIG, "request_timeout": 2.0, **overrides}
        return NetworkClient(config), ws

    return factory


@pytest.fixture
def mock_server() -> Callable[..., None]:
    """Run `scenario(client, devices)` against a live mock server on a free port."""

    def run(scenario: Callable[[NetworkClient, Dict[str, Any]], Awaitable[None]], **overrides: Any) -> None:
        async def main() -> None:
            config = {**DEFAULT_SERVER_CONFIG, "port": 0, "memory_size": 0x10000, **overrides}
            server, devices = build_server(config)
            await server.start()
            client = NetworkClient({**DEFAULT_CONFIG, "host": "127.0.0.1", "port": server.port, "request_timeout": 5.0})
            try:
                await scenario(client, devices)
            finally:
                await client.disconnect()
                await server.stop()

        asyncio.run(main())

    return run
