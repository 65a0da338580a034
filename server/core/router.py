from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

from shared.protocol.commands import OpCode, is_opcode, normalize_opcode, opcodes_in_group
from shared.protocol.errors import InvalidCommandError
from shared.protocol.messages import Command

if TYPE_CHECKING:
    from .connection import ConnectionContext

# Opcodes usable before Attach; everything else targets the attached device.
DEVICELESS_OPCODES = frozenset(opcodes_in_group("connection"))


@dataclass
class HandlerResult:
    """What to send back: an optional reply frame, then an optional binary frame."""

    results: Optional[List[str]] = None
    payload: Optional[bytes] = None


Handler = Callable[[Command, "ConnectionContext"], Awaitable[Optional[HandlerResult]]]


class CommandRouter:
    """Maps opcodes to async handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[str, Handler] = {}

    def register(self, opcode: OpCode, handler: Handler) -> None:
        name = normalize_opcode(opcode)
        if not is_opcode(name):
            raise ValueError(f"Unknown opcode {name}")
        self._handlers[name] = handler

    def handles(self, opcode: str) -> bool:
        return normalize_opcode(opcode) in self._handlers

    async def dispatch(self, command: Command, ctx: "ConnectionContext") -> Optional[HandlerResult]:
        handler = self._handlers.get(command.opcode_text)
        if handler is None:
            return None
        if command.opcode_text not in DEVICELESS_OPCODES and not ctx.is_attached():
            raise InvalidCommandError(f"{command.opcode_text} requires an attached device")
        return await handler(command, ctx)
