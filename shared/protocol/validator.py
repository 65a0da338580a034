from __future__ import annotations

from typing import Any, Dict

import jsonschema

from .commands import OpCode
from .constants import SPACE
from .errors import InvalidCommandError, MalformedReplyError

_STRING_LIST = {"type": "array", "items": {"type": "string"}, "minItems": 1}

COMMAND_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["Opcode", "Space"],
    "properties": {
        "Opcode": {"type": "string", "enum": [op.value for op in OpCode]},
        "Space": {"const": SPACE},
        "Flags": _STRING_LIST,
        "Operands": _STRING_LIST,
    },
    "additionalProperties": False,
}

REPLY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["Results"],
    "properties": {
        "Results": {"type": "array", "items": {"type": "string"}},
    },
}


def validate_command(message: Dict[str, Any]) -> None:
    """Check an outgoing envelope; empty Flags/Operands must already be dropped."""
    try:
        jsonschema.validate(instance=message, schema=COMMAND_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise InvalidCommandError(f"Schema validation failed: {exc.message}") from exc


def validate_reply(message: Any) -> None:
    try:
        jsonschema.validate(instance=message, schema=REPLY_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise MalformedReplyError(f"Schema validation failed: {exc.message}") from exc


__all__ = ["COMMAND_SCHEMA", "REPLY_SCHEMA", "validate_command", "validate_reply"]
