"""Raw-mode terminal runner."""

from __future__ import annotations

import asyncio
import os
import sys
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from loguru import logger

from rzterm.terminal.console import TerminalConsole

READ_SIZE = 1024
EOT = b"\x04"


class StreamWriter:
    """Terminal writer over a text stream, flushed per write."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()


@contextmanager
def raw_terminal(fd: int) -> Iterator[None]:
    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


async def run_raw(console: TerminalConsole, stdin: TextIO | None = None) -> None:
    """Feed raw keystrokes from a tty into ``console`` until EOF, Ctrl-D or quit."""
    loop = asyncio.get_running_loop()
    fd = (stdin or sys.stdin).fileno()
    reads: asyncio.Queue[bytes | None] = asyncio.Queue()

    def _on_readable() -> None:
        data = os.read(fd, READ_SIZE)
        reads.put_nowait(data or None)

    with raw_terminal(fd):
        loop.add_reader(fd, _on_readable)
        try:
            await pump_reads(console, reads)
        finally:
            loop.remove_reader(fd)
    console.writeln()
    logger.info("terminal.closed")


async def pump_reads(console: TerminalConsole, reads: asyncio.Queue[bytes | None]) -> None:
    """Hand queued raw reads to ``console``; ``None`` marks end of input."""
    while not console.exit_requested:
        data = await reads.get()
        if data is None:
            break
        if data == EOT and not console.editor.buffer and not console.keys.pending:
            break
        await console.feed_stream(data)


async def run_lines(console: TerminalConsole, stdin: TextIO | None = None) -> None:
    """Execute one command per line when stdin is not a terminal."""
    stream = stdin or sys.stdin
    while not console.exit_requested:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            break
        await console.send_input(line)
    console.writeln()
