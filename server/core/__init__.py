from .connection import ConnectionContext
from .connection_manager import ConnectionManager
from .router import CommandRouter, HandlerResult
from .server import SocketServer

__all__ = ["ConnectionContext", "ConnectionManager", "CommandRouter", "HandlerResult", "SocketServer"]
