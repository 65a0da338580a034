from .cli import SnesCLI

__all__ = ["SnesCLI"]
