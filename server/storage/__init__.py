from .memory import DEFAULT_MEMORY_SIZE, InMemoryDevice

__all__ = ["InMemoryDevice", "DEFAULT_MEMORY_SIZE"]
