from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from . import validator
from .constants import ENCODING
from .errors import InvalidCommandError, MalformedReplyError
from .messages import Command, Reply

Fragment = Union[str, bytes]


class FrameKind(Enum):
    TEXT = "text"
    BINARY = "binary"
    CLOSE = "close"


@dataclass(frozen=True)
class Frame:
    """One complete logical websocket message."""

    kind: FrameKind
    data: bytes = b""

    @property
    def text(self) -> str:
        return self.data.decode(ENCODING)

    @classmethod
    def close(cls) -> "Frame":
        return cls(FrameKind.CLOSE)


def encode_command(command: Command) -> str:
    """Serialize a command into the text message sent on the wire."""
    message = command.to_wire()
    validator.validate_command(message)
    return json.dumps(message, ensure_ascii=False, separators=(",", ":"))


def decode_command(data: Union[str, bytes]) -> Command:
    """Parse a text frame received by the server into a Command."""
    try:
        raw = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidCommandError(f"Decode failed: {exc}") from exc
    validator.validate_command(raw)
    return Command.model_validate(raw)


def decode_reply(data: Union[str, bytes]) -> Reply:
    """Parse a text frame into a Reply."""
    try:
        raw = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedReplyError(f"Decode failed: {exc}") from exc
    validator.validate_reply(raw)
    return Reply.from_dict(raw)


def assemble_fragments(fragments: Iterable[Fragment]) -> Frame:
    """
    Join the fragments of one message into a single Frame.
    Text fragments arrive as str, binary fragments as bytes; every fragment,
    including continuations, is appended to the buffer in arrival order.
    """
    kind = None
    buffer = bytearray()
    for fragment in fragments:
        fragment_kind = FrameKind.TEXT if isinstance(fragment, str) else FrameKind.BINARY
        if kind is None:
            kind = fragment_kind
        elif fragment_kind is not kind:
            raise MalformedReplyError("Continuation fragment changed message type")
        buffer += fragment.encode(ENCODING) if isinstance(fragment, str) else fragment
    if kind is None:
        raise MalformedReplyError("Message contained no fragments")
    return Frame(kind, bytes(buffer))


__all__ = ["Fragment", "FrameKind", "Frame", "encode_command", "decode_command", "decode_reply", "assemble_fragments"]
