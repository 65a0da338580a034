from __future__ import annotations

import posixpath
from typing import Dict, List, Optional, Tuple

DEFAULT_MEMORY_SIZE = 0x1000000  # 24-bit SNES address space

# List entry types, as reported on the wire.
DIRECTORY = "0"
FILE = "1"


def _normalize(path: str) -> str:
    return posixpath.normpath("/" + path.strip().lstrip("/"))


class InMemoryDevice:
    """
    Emulated cartridge: flat memory image, SD card filesystem, applied patches.
    Everything lives for the lifetime of the server process only.
    """

    def __init__(self, name: str, memory_size: int = DEFAULT_MEMORY_SIZE, firmware: str = "1.11.0") -> None:
        self.name = name
        self.firmware = firmware
        self.memory = bytearray(memory_size)
        self.files: Dict[str, bytes] = {}
        self.dirs = {"/"}
        self.patches: Dict[str, bytes] = {}
        self.running_rom: Optional[str] = None
        self.resets = 0

    # --- Memory ------------------------------------------------------------
    def read(self, offset: int, size: int) -> bytes:
        self._check_range(offset, size)
        return bytes(self.memory[offset : offset + size])

    def write(self, offset: int, data: bytes) -> None:
        self._check_range(offset, len(data))
        self.memory[offset : offset + len(data)] = data

    def _check_range(self, offset: int, size: int) -> None:
        if offset < 0 or size < 0 or offset + size > len(self.memory):
            raise ValueError(f"Range {offset:#x}+{size:#x} outside memory of {len(self.memory):#x} bytes")

    # --- Console -----------------------------------------------------------
    def info(self) -> List[str]:
        rom = self.running_rom or "/sd2snes/menu.bin"
        return [self.firmware, "USB2SNES mock", rom, "NO_CONTROL_CMD"]

    def boot(self, rom_path: str) -> None:
        path = _normalize(rom_path)
        if path not in self.files:
            raise FileNotFoundError(path)
        self.running_rom = path

    def menu(self) -> None:
        self.running_rom = None

    def reset(self) -> None:
        self.resets += 1

    def apply_patch(self, name: str, data: bytes) -> None:
        self.patches[name] = data

    # --- Filesystem --------------------------------------------------------
    def get_file(self, path: str) -> bytes:
        path = _normalize(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def put_file(self, path: str, data: bytes) -> None:
        path = _normalize(path)
        self._require_dir(posixpath.dirname(path))
        self.files[path] = data

    def list(self, dir_path: str) -> List[Tuple[str, str]]:
        dir_path = _normalize(dir_path)
        self._require_dir(dir_path)
        entries: List[Tuple[str, str]] = []
        for child in sorted(self.dirs):
            if child != dir_path and posixpath.dirname(child) == dir_path:
                entries.append((DIRECTORY, posixpath.basename(child)))
        for path in sorted(self.files):
            if posixpath.dirname(path) == dir_path:
                entries.append((FILE, posixpath.basename(path)))
        return entries

    def make_dir(self, dir_path: str) -> None:
        dir_path = _normalize(dir_path)
        self._require_dir(posixpath.dirname(dir_path))
        self.dirs.add(dir_path)

    def remove(self, path: str) -> None:
        path = _normalize(path)
        if path in self.files:
            del self.files[path]
        elif path in self.dirs and path != "/":
            if any(posixpath.dirname(p) == path for p in (*self.files, *self.dirs) if p != path):
                raise OSError(f"Directory {path} is not empty")
            self.dirs.remove(path)
        else:
            raise FileNotFoundError(path)

    def rename(self, path: str, new_name: str) -> None:
        path = _normalize(path)
        target = _normalize(posixpath.join(posixpath.dirname(path), new_name))
        if path in self.files:
            self.files[target] = self.files.pop(path)
        elif path in self.dirs and path != "/":
            prefix = path + "/"
            self.dirs = {target + d[len(path):] if d == path or d.startswith(prefix) else d for d in self.dirs}
            self.files = {
                (target + p[len(path):] if p.startswith(prefix) else p): data for p, data in self.files.items()
            }
        else:
            raise FileNotFoundError(path)

    def _require_dir(self, dir_path: str) -> None:
        if _normalize(dir_path) not in self.dirs:
            raise FileNotFoundError(dir_path)


__all__ = ["InMemoryDevice", "DEFAULT_MEMORY_SIZE", "DIRECTORY", "FILE"]
