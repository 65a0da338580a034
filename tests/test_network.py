import asyncio
import json

import pytest

from client.core import ConnectionState
from client.features import ControlManager, DeviceManager, FileManager, MemoryManager
from shared.protocol import (
    MalformedReplyError,
    NotConnectedError,
    NotImplementedByProtocolError,
    ReplyTimeoutError,
    RequestCancelledError,
)


async def _attached(client):
    await client.connect()
    await client.attach("SD2SNES COM3")


def test_connect_is_idempotent_and_attach_changes_state(fake_client):
    async def scenario():
        client, ws = fake_client()
        assert client.state is ConnectionState.DISCONNECTED
        await client.connect()
        await client.connect()
        assert client.state is ConnectionState.CONNECTED
        await client.attach("SD2SNES COM3")
        assert client.state is ConnectionState.ATTACHED
        assert client.device == "SD2SNES COM3"
        assert ws.commands() == [{"Opcode": "Attach", "Space": "SNES", "Operands": ["SD2SNES COM3"]}]
        await client.disconnect()
        await client.disconnect()
        assert client.state is ConnectionState.DISCONNECTED
        assert ws.closed

    asyncio.run(scenario())


def test_attached_only_commands_fail_without_io(fake_client):
    async def scenario():
        client, ws = fake_client()
        files = FileManager(client)
        with pytest.raises(NotConnectedError):
            await files.list("/")
        await client.connect()
        with pytest.raises(NotConnectedError):
            await files.list("/")
        with pytest.raises(NotConnectedError):
            await MemoryManager(client).put_address(0, b"\x00")
        with pytest.raises(NotConnectedError):
            await DeviceManager(client).info()
        assert ws.sent == []
        await client.disconnect()

    asyncio.run(scenario())


def test_device_commands_need_only_a_connection(fake_client):
    async def scenario():
        client, ws = fake_client()
        devices = DeviceManager(client, client_name="tests")
        with pytest.raises(NotConnectedError):
            await devices.device_list()
        await client.connect()
        assert await devices.device_list() == ["SD2SNES COM3", "EMU SNES9X"]
        assert await devices.app_version() == "7.42.0"
        await devices.name()
        assert ws.commands()[-1] == {"Opcode": "Name", "Space": "SNES", "Operands": ["tests"]}
        await client.disconnect()

    asyncio.run(scenario())


def test_unimplemented_opcodes_fail_immediately(fake_client):
    async def scenario():
        client, ws = fake_client()
        control = ControlManager(client)
        for operation in (control.binary, control.stream, control.fence):
            with pytest.raises(NotImplementedByProtocolError):
                await operation()
        assert ws.sent == []

    asyncio.run(scenario())


def test_list_splits_pairs_in_order(fake_client):
    async def scenario():
        client, ws = fake_client()
        results = ["0", "saves", "1", "game.sfc", "1", "hack.smc"]
        ws.overrides["List"] = [[json.dumps({"Results": results})]]
        await _attached(client)
        types, names = await FileManager(client).list("/dir")
        assert types == ["0", "1", "1"]
        assert names == ["saves", "game.sfc", "hack.smc"]
        await client.disconnect()

    asyncio.run(scenario())


def test_list_with_odd_result_count_fails(fake_client):
    async def scenario():
        client, ws = fake_client()
        ws.overrides["List"] = [[json.dumps({"Results": ["0", "saves", "1"]})]]
        await _attached(client)
        with pytest.raises(MalformedReplyError):
            await FileManager(client).list("/dir")
        await client.disconnect()

    asyncio.run(scenario())


def test_memory_roundtrip(fake_client):
    async def scenario():
        client, ws = fake_client()
        ws.memory[0x100:0x104] = b"\xde\xad\xbe\xef"
        await _attached(client)
        memory = MemoryManager(client)
        data = await memory.get_address(0x100, 4)
        assert data == b"\xde\xad\xbe\xef"
        await memory.put_address(0x200, data)
        assert await memory.get_address(0x200, 4) == data
        put = [c for c in ws.commands() if c["Opcode"] == "PutAddress"]
        assert put == [{"Opcode": "PutAddress", "Space": "SNES", "Operands": ["200", "4"]}]
        await client.disconnect()

    asyncio.run(scenario())


def test_concurrent_requests_never_interleave(fake_client):
    async def scenario():
        client, ws = fake_client(delay=0.005)
        for index in range(8):
            ws.memory[index * 16 : index * 16 + 16] = bytes([index]) * 16
        await _attached(client)
        memory = MemoryManager(client)
        results = await asyncio.gather(*(memory.get_address(index * 16, 16) for index in range(8)))
        assert results == [bytes([index]) * 16 for index in range(8)]
        assert ws.max_in_flight == 1
        await client.disconnect()

    asyncio.run(scenario())


def test_malformed_reply_still_drains_payload(fake_client):
    async def scenario():
        client, ws = fake_client()
        ws.memory[0:2] = b"\x0a\x0b"
        await _attached(client)
        memory = MemoryManager(client)
        ws.overrides["GetAddress"] = [["{not json"], [b"\xff\xff"]]
        with pytest.raises(MalformedReplyError):
            await memory.get_address(0, 2)
        del ws.overrides["GetAddress"]
        assert await memory.get_address(0, 2) == b"\x0a\x0b"
        await client.disconnect()

    asyncio.run(scenario())


def test_short_payload_is_rejected(fake_client):
    async def scenario():
        client, ws = fake_client()
        await _attached(client)
        ws.overrides["GetAddress"] = [[json.dumps({"Results": ["4"]})], [b"\x00"]]
        with pytest.raises(MalformedReplyError):
            await MemoryManager(client).get_address(0, 4)
        await client.disconnect()

    asyncio.run(scenario())


def test_disconnect_releases_pending_request(fake_client):
    async def scenario():
        client, ws = fake_client()
        await _attached(client)
        ws.silent = True
        devices = DeviceManager(client)
        pending = asyncio.create_task(devices.info())
        queued = asyncio.create_task(devices.app_version())
        await asyncio.sleep(0.05)
        assert not pending.done()
        await asyncio.wait_for(client.disconnect(), client.close_timeout)
        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(pending, client.close_timeout)
        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(queued, client.close_timeout)
        assert client.state is ConnectionState.DISCONNECTED

    asyncio.run(scenario())


def test_peer_close_fails_pending_request(fake_client):
    async def scenario():
        client, ws = fake_client()
        await _attached(client)
        ws.silent = True
        pending = asyncio.create_task(DeviceManager(client).info())
        await asyncio.sleep(0.01)
        await ws.close()
        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(pending, 1)
        await asyncio.sleep(0.01)
        assert client.state is ConnectionState.DISCONNECTED
        with pytest.raises(NotConnectedError):
            await DeviceManager(client).device_list()

    asyncio.run(scenario())


def test_missing_reply_times_out_and_closes_connection(fake_client):
    async def scenario():
        client, ws = fake_client(request_timeout=0.05)
        await client.connect()
        ws.silent = True
        with pytest.raises(ReplyTimeoutError):
            await DeviceManager(client).device_list()
        assert client.state is ConnectionState.DISCONNECTED
        assert ws.closed

    asyncio.run(scenario())


def test_cancelled_request_does_not_leak_reply_to_next_request(fake_client):
    async def scenario():
        client, ws = fake_client(delay=0.05)
        ws.memory[0:4] = b"AAAA"
        ws.memory[16:20] = b"BBBB"
        await _attached(client)
        memory = MemoryManager(client)
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(memory.get_address(0, 4), 0.01)
        # The GetAddress reply is still in flight, so the connection cannot be reused.
        with pytest.raises(NotConnectedError):
            await memory.get_address(16, 4)
        with pytest.raises(NotConnectedError):
            await DeviceManager(client).app_version()
        await asyncio.sleep(0.1)
        assert client.state is ConnectionState.DISCONNECTED
        assert ws.closed

    asyncio.run(scenario())
