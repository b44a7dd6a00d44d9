"""Interactive terminal: key chunks in, styled terminal text out."""

from __future__ import annotations

import asyncio
from typing import Protocol

from loguru import logger

from rzterm.output.sanitize import classify_result
from rzterm.session import Session
from rzterm.types import ExecutionResult

from .editor import EditorAction, LineEditor
from .keys import KeyStream, decode_key
from .prompt import CLEAR_LINE, render_prompt
from .styles import BOLD_CYAN, GREEN, GREY, YELLOW, render_line, styled

HINT = 'Type commands. Try: "afl", "iz", "pdf @ main", "?"'
QUIT_COMMANDS = frozenset({"q", "quit", "exit"})


class TerminalWriter(Protocol):
    def write(self, text: str) -> None: ...


class TerminalConsole:
    """Drive a ``LineEditor`` from raw input and replay engine output.

    Chunks are handled strictly one after another: a submitted command is
    awaited before the next chunk is decoded, so keys typed meanwhile are
    processed as type-ahead once the prompt is back.
    """

    def __init__(self, session: Session, writer: TerminalWriter) -> None:
        self.session = session
        self.editor = LineEditor(session.history)
        self.keys = KeyStream()
        self._writer = writer
        self._prompt = render_prompt(None)
        self._input_lock = asyncio.Lock()
        self._connected = False
        self.exit_requested = False

    @property
    def connected(self) -> bool:
        return self._connected

    def write(self, text: str) -> None:
        if text:
            self._writer.write(text)

    def writeln(self, text: str = "") -> None:
        self._writer.write(text + "\r\n")

    def welcome(self) -> None:
        self.writeln(styled("rzterm - rizin terminal", BOLD_CYAN))
        self.writeln()
        self.writeln(styled("Waiting for rizin...", YELLOW))

    async def connect(self) -> None:
        """Announce the opened file and arm the first prompt."""
        current = self.session.current_file
        self.writeln(styled("Connected to rizin!", GREEN))
        self.writeln(styled(f"File: {current.name if current else 'unknown'}", GREY))
        analysis = self.session.analysis
        if analysis is not None:
            self.writeln(styled(f"Functions: {len(analysis.functions)}, Strings: {len(analysis.strings)}", GREY))
        self.writeln(styled(HINT, GREY))
        self.writeln()
        self._connected = True
        await self.show_prompt()

    async def show_prompt(self) -> None:
        address = await self.session.current_address()
        self._prompt = render_prompt(address)
        self.write(self._prompt)

    async def feed(self, chunk: str | bytes) -> None:
        """Handle one atomic key chunk."""
        async with self._input_lock:
            action = self.editor.apply(decode_key(chunk))
            await self._perform(action)

    async def feed_stream(self, data: str | bytes) -> None:
        """Handle one raw terminal read that may hold several keys.

        An escape sequence or UTF-8 character cut off at the end of the read is
        completed by the next one.
        """
        for chunk in self.keys.feed(data):
            await self.feed(chunk)

    async def send_input(self, text: str) -> ExecutionResult | None:
        """Run a command on behalf of the user, outside the edit line."""
        command = text.rstrip("\r\n")
        if not command:
            return None
        if command.strip() in QUIT_COMMANDS:
            self.exit_requested = True
            return None
        async with self._input_lock:
            result = await self.execute(command)
            await self.show_prompt()
        return result

    async def execute(self, command: str) -> ExecutionResult:
        result = await self.session.submit(command)
        if not result.ok:
            logger.info("console.fault command={!r} fault={}", command, result.fault)
        self.write_result(result)
        return result

    def write_result(self, result: ExecutionResult) -> None:
        for line in classify_result(result):
            self.writeln(render_line(line))

    async def _perform(self, action: EditorAction) -> None:
        self.write(action.echo)
        if action.recall is not None:
            self.write(CLEAR_LINE + self._prompt + action.recall)
        if action.submitted in QUIT_COMMANDS:
            self.exit_requested = True
            return
        if action.submitted is not None:
            await self.execute(action.submitted)
        if action.rearm:
            await self.show_prompt()
