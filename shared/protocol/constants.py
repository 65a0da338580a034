"""Protocol-wide constants shared by the client and the mock server."""

SPACE = "SNES"
ENCODING = "utf-8"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
DEFAULT_CLIENT_NAME = "snes-client"
CLOSE_TIMEOUT = 2.0  # seconds to wait for the peer's close acknowledgment
MAX_MESSAGE_SIZE = 16 * 1024 * 1024  # largest logical message accepted from the peer

__all__ = [
    "SPACE",
    "ENCODING",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_CLIENT_NAME",
    "CLOSE_TIMEOUT",
    "MAX_MESSAGE_SIZE",
]
