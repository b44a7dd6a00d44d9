"""Execution bridge between the terminal and the analysis engine."""

from .bus import OutputBus
from .dispatcher import CommandDispatcher, needs_analysis, rewrite_command
from .events import StderrChunk, StdoutChunk

__all__ = [
    "CommandDispatcher",
    "OutputBus",
    "StderrChunk",
    "StdoutChunk",
    "needs_analysis",
    "rewrite_command",
]
