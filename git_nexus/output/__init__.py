"""Output abstraction layer."""

from .console import (
    Cell,
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)

__all__ = [
    "Cell",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
]
