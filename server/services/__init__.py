from .device_service import DeviceService
from .file_service import FileService
from .memory_service import MemoryService

__all__ = ["DeviceService", "FileService", "MemoryService"]
