from .connection import ConnectionContext
from .gate import RequestGate
from .network import NetworkClient
from .router import FrameRouter
from .state import ConnectionState

__all__ = ["ConnectionContext", "ConnectionState", "FrameRouter", "NetworkClient", "RequestGate"]
