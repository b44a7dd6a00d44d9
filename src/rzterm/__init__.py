"""rzterm - interactive rizin terminal."""

from .session import Session
from .terminal.console import TerminalConsole

__version__ = "0.1.0"

__all__ = ["Session", "TerminalConsole"]
