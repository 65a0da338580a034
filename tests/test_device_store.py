import pytest

from server.storage import InMemoryDevice


def _device():
    return InMemoryDevice("SD2SNES COM3", memory_size=0x100)


def test_memory_bounds_are_enforced():
    device = _device()
    device.write(0xFC, b"\x01\x02\x03\x04")
    assert device.read(0xFC, 4) == b"\x01\x02\x03\x04"
    with pytest.raises(ValueError):
        device.read(0xFE, 4)


def test_directory_listing_orders_dirs_before_files():
    device = _device()
    device.make_dir("/saves")
    device.put_file("/b.sfc", b"b")
    device.put_file("/a.sfc", b"a")
    assert device.list("/") == [("0", "saves"), ("1", "a.sfc"), ("1", "b.sfc")]


def test_put_file_requires_parent_directory():
    with pytest.raises(FileNotFoundError):
        _device().put_file("/missing/game.sfc", b"")


def test_rename_directory_moves_contents():
    device = _device()
    device.make_dir("/old")
    device.put_file("/old/game.sfc", b"rom")
    device.rename("/old", "new")
    assert device.get_file("/new/game.sfc") == b"rom"
    assert "/old" not in device.dirs


def test_remove_non_empty_directory_fails():
    device = _device()
    device.make_dir("/roms")
    device.put_file("/roms/game.sfc", b"rom")
    with pytest.raises(OSError):
        device.remove("/roms")
    device.remove("/roms/game.sfc")
    device.remove("/roms")
    assert device.list("/") == []
