"""Single-flight command execution against the analysis engine."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from loguru import logger

from rzterm.bridge.bus import OutputBus
from rzterm.bridge.events import StderrChunk, StdoutChunk
from rzterm.engine.base import Engine
from rzterm.output.sanitize import sanitize
from rzterm.types import ExecutionResult

T = TypeVar("T")

ANALYSIS_TOKEN = "aa"
# Commands that read the function/xref database built by analysis.
ANALYSIS_PREFIXES = ("pdf", "afl", "afn", "agf", "agc", "VV", "ax", "af", "pd ")


def split_command(command: str) -> list[str]:
    return [part.strip() for part in command.strip().split(";")]


def is_seek(part: str) -> bool:
    return part == "s" or part.startswith("s ")


def needs_analysis(command: str) -> bool:
    parts = split_command(command)
    if any(is_seek(part) for part in parts):
        return False
    return any(part.startswith(ANALYSIS_PREFIXES) for part in parts)


def rewrite_command(command: str) -> str:
    """Prefix the base analysis pass when the command depends on it."""
    if needs_analysis(command) and ANALYSIS_TOKEN not in command:
        return f"{ANALYSIS_TOKEN};{command}"
    return command


class CommandDispatcher:
    """Serialize commands into engine calls and publish their output.

    Submissions queue behind an ``asyncio.Lock`` in arrival order, so the
    engine never sees two overlapping calls. An in-flight call cannot be
    cancelled or timed out: the engine offers no primitive for either.
    """

    def __init__(self, engine: Engine, bus: OutputBus | None = None) -> None:
        self._engine = engine
        self._bus = bus or OutputBus()
        self._lock = asyncio.Lock()
        self._last_stderr = ""

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def bus(self) -> OutputBus:
        return self._bus

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def last_stderr(self) -> str:
        return self._last_stderr

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[Engine]:
        """Hold the engine for a multi-step pipeline such as opening a file."""
        async with self._lock:
            yield self._engine

    async def submit(self, command: str) -> ExecutionResult:
        dispatched = rewrite_command(command)
        if dispatched != command:
            logger.debug("dispatch.rewrite command={!r} dispatched={!r}", command, dispatched)

        async with self._lock:
            result = await self._in_worker(self._execute, command, dispatched)
            self._last_stderr = result.stderr
            await self._publish(result)
        return result

    async def current_address(self) -> str:
        async with self._lock:
            return await self._in_worker(self._engine.current_address)

    async def _in_worker(self, func: Callable[..., T], *args: Any) -> T:
        """Run one blocking engine call in a worker thread while the lock is held.

        A running engine call cannot be stopped, so a cancelled caller keeps
        the lock until the worker returns before the cancellation propagates.
        """
        future = asyncio.ensure_future(asyncio.to_thread(func, *args))
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            logger.debug("dispatch.cancelled pending={}", func.__name__)
            await asyncio.wait([future])
            raise

    def _execute(self, command: str, dispatched: str) -> ExecutionResult:
        try:
            stdout = self._engine.execute_command(dispatched)
            stderr = self._engine.last_stderr()
        except Exception as exc:
            # The engine is an external boundary; a fault must not end the session.
            logger.opt(exception=True).warning("engine.fault command={!r}", dispatched)
            return ExecutionResult(command=command, dispatched=dispatched, fault=str(exc) or type(exc).__name__)
        return ExecutionResult(
            command=command,
            dispatched=dispatched,
            stdout=sanitize(stdout),
            stderr=sanitize(stderr),
        )

    async def _publish(self, result: ExecutionResult) -> None:
        if result.stderr:
            await self._bus.publish(StderrChunk(command=result.command, text=result.stderr))
        if result.stdout:
            await self._bus.publish(StdoutChunk(command=result.command, text=result.stdout))
