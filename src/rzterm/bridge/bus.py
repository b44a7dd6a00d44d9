"""Fan-out of engine output to in-process subscribers."""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, TypeAlias

from blinker import Signal
from loguru import logger

from rzterm.bridge.events import OutputChunk, StderrChunk, StdoutChunk

ChunkHandler: TypeAlias = Callable[[OutputChunk], Coroutine[Any, Any, None]]
Channel: TypeAlias = type[StdoutChunk] | type[StderrChunk]


class OutputBus:
    """Deliver every ``OutputChunk`` over one blinker signal.

    Subscribers see chunks in publish order and may narrow delivery to one
    channel. A subscriber that raises is logged and skipped; the command that
    produced the output still completes and the other subscribers still run.
    """

    def __init__(self) -> None:
        self._output = Signal("rzterm.output")

    async def publish(self, chunk: OutputChunk) -> None:
        await self._output.send_async(self, chunk=chunk)

    def subscribe(self, handler: ChunkHandler, *, channel: Channel | None = None) -> Callable[[], None]:
        """Connect ``handler`` and return the callable that disconnects it."""

        async def _deliver(_sender: Any, *, chunk: OutputChunk) -> None:
            if channel is not None and not isinstance(chunk, channel):
                return
            try:
                await handler(chunk)
            except Exception:
                logger.opt(exception=True).warning("bus.subscriber_failed command={!r}", chunk.command)

        self._output.connect(_deliver, weak=False)
        return lambda: self._output.disconnect(_deliver)
