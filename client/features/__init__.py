from .control import ControlManager
from .devices import DeviceManager
from .files import FileManager
from .memory import MemoryManager
from .snes import Snes

__all__ = ["ControlManager", "DeviceManager", "FileManager", "MemoryManager", "Snes"]
