from __future__ import annotations

from enum import StrEnum
from typing import Dict, Iterable, Union


class OpCode(StrEnum):
    """
    Opcodes understood by a usb2snes server.
    The enum value is the exact text placed in the "Opcode" field on the wire.
    """

    # Connection
    DEVICE_LIST = "DeviceList"  # -> {device1, device2, ...}
    ATTACH = "Attach"  # [device]
    APP_VERSION = "AppVersion"  # -> {version}
    NAME = "Name"  # [client name]
    CLOSE = "Close"

    # Special
    INFO = "Info"  # -> {firmware, version string, rom running, flag1, ...}
    BOOT = "Boot"  # [rom path]
    MENU = "Menu"
    RESET = "Reset"
    BINARY = "Binary"
    STREAM = "Stream"
    FENCE = "Fence"

    # Memory
    GET_ADDRESS = "GetAddress"  # [offset, size] -> {size} -> data
    PUT_ADDRESS = "PutAddress"  # [offset, size] then data
    PUT_IPS = "PutIPS"  # [name, size] then data

    # File
    GET_FILE = "GetFile"  # [path] -> {size} -> data
    PUT_FILE = "PutFile"  # [path, size] then data
    LIST = "List"  # [dir] -> {type1, name1, type2, name2, ...}
    REMOVE = "Remove"  # [path]
    RENAME = "Rename"  # [path, new name]
    MAKE_DIR = "MakeDir"  # [dir]


OPCODE_GROUPS: Dict[str, str] = {
    OpCode.DEVICE_LIST.value: "connection",
    OpCode.ATTACH.value: "connection",
    OpCode.APP_VERSION.value: "connection",
    OpCode.NAME.value: "connection",
    OpCode.CLOSE.value: "connection",
    OpCode.INFO.value: "special",
    OpCode.BOOT.value: "special",
    OpCode.MENU.value: "special",
    OpCode.RESET.value: "special",
    OpCode.BINARY.value: "special",
    OpCode.STREAM.value: "special",
    OpCode.FENCE.value: "special",
    OpCode.GET_ADDRESS.value: "memory",
    OpCode.PUT_ADDRESS.value: "memory",
    OpCode.PUT_IPS.value: "memory",
    OpCode.GET_FILE.value: "file",
    OpCode.PUT_FILE.value: "file",
    OpCode.LIST.value: "file",
    OpCode.REMOVE.value: "file",
    OpCode.RENAME.value: "file",
    OpCode.MAKE_DIR.value: "file",
}

# Defined by the protocol but without documented behaviour in this version.
UNIMPLEMENTED_OPCODES = frozenset({OpCode.BINARY, OpCode.STREAM, OpCode.FENCE})


def normalize_opcode(opcode: Union[str, OpCode]) -> str:
    """Convert enum/string into the opcode text used on the wire."""
    return opcode.value if isinstance(opcode, OpCode) else str(opcode)


def is_opcode(value: str) -> bool:
    """Check if `value` is a known opcode."""
    try:
        OpCode(value)
        return True
    except ValueError:
        return False


def is_implemented(opcode: Union[str, OpCode]) -> bool:
    return normalize_opcode(opcode) not in UNIMPLEMENTED_OPCODES


def opcodes_in_group(group: str) -> Iterable[str]:
    """Yield opcodes belonging to the specified group."""
    for opcode, grp in OPCODE_GROUPS.items():
        if grp == group:
            yield opcode


__all__ = [
    "OpCode",
    "OPCODE_GROUPS",
    "UNIMPLEMENTED_OPCODES",
    "normalize_opcode",
    "is_opcode",
    "is_implemented",
    "opcodes_in_group",
]
