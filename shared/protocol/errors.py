from __future__ import annotations

from enum import IntEnum


class ErrorKind(IntEnum):
    """Failure categories surfaced by the protocol client."""

    NOT_CONNECTED = 1
    NOT_IMPLEMENTED = 2
    CONNECTION_FAILED = 3
    CANCELLED = 4
    MALFORMED_REPLY = 5
    TIMEOUT = 6
    INVALID_COMMAND = 7


class ProtocolError(Exception):
    """Structured protocol exception carrying a kind + message."""

    kind: ErrorKind = ErrorKind.CONNECTION_FAILED

    def __init__(self, message: str = "", kind: ErrorKind | None = None) -> None:
        if kind is not None:
            self.kind = kind
        self.message = message
        super().__init__(f"{self.kind.name}: {message}")


class NotConnectedError(ProtocolError):
    """Command issued below the connection state it requires."""

    kind = ErrorKind.NOT_CONNECTED


class NotImplementedByProtocolError(ProtocolError):
    kind = ErrorKind.NOT_IMPLEMENTED


class ConnectionFailedError(ProtocolError):
    kind = ErrorKind.CONNECTION_FAILED


class RequestCancelledError(ProtocolError):
    """Pending request aborted because the connection went away."""

    kind = ErrorKind.CANCELLED


class MalformedReplyError(ProtocolError):
    """Reply frame could not be parsed or does not match the request."""

    kind = ErrorKind.MALFORMED_REPLY


class ReplyTimeoutError(ProtocolError):
    kind = ErrorKind.TIMEOUT


class InvalidCommandError(ProtocolError):
    """Outgoing command does not satisfy the envelope schema."""

    kind = ErrorKind.INVALID_COMMAND


__all__ = [
    "ErrorKind",
    "ProtocolError",
    "NotConnectedError",
    "NotImplementedByProtocolError",
    "ConnectionFailedError",
    "RequestCancelledError",
    "MalformedReplyError",
    "ReplyTimeoutError",
    "InvalidCommandError",
]
