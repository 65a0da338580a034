"""
Shared protocol package that centralizes opcodes, envelope models, framing helpers,
and validation utilities for both the client and the mock device server.
"""

from .commands import OpCode, UNIMPLEMENTED_OPCODES, is_implemented, is_opcode, normalize_opcode, opcodes_in_group
from .constants import CLOSE_TIMEOUT, DEFAULT_HOST, DEFAULT_PORT, ENCODING, SPACE
from .errors import (
    ConnectionFailedError,
    ErrorKind,
    InvalidCommandError,
    MalformedReplyError,
    NotConnectedError,
    NotImplementedByProtocolError,
    ProtocolError,
    ReplyTimeoutError,
    RequestCancelledError,
)
from .framing import Frame, FrameKind, assemble_fragments, decode_command, decode_reply, encode_command
from .messages import Command, Reply
from .validator import validate_command, validate_reply

__all__ = [
    "OpCode",
    "UNIMPLEMENTED_OPCODES",
    "is_implemented",
    "is_opcode",
    "normalize_opcode",
    "opcodes_in_group",
    "CLOSE_TIMEOUT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "ENCODING",
    "SPACE",
    "ErrorKind",
    "ProtocolError",
    "NotConnectedError",
    "NotImplementedByProtocolError",
    "ConnectionFailedError",
    "RequestCancelledError",
    "MalformedReplyError",
    "ReplyTimeoutError",
    "InvalidCommandError",
    "Frame",
    "FrameKind",
    "assemble_fragments",
    "decode_command",
    "decode_reply",
    "encode_command",
    "Command",
    "Reply",
    "validate_command",
    "validate_reply",
]
