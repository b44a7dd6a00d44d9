"""Append engine output published on the bus to a transcript file."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from rzterm.bridge.bus import OutputBus
from rzterm.bridge.events import OutputChunk, StderrChunk


class Transcript:
    """Bus subscriber that records every output chunk with its channel."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self, bus: OutputBus) -> None:
        self.detach()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._unsubscribe = bus.subscribe(self._record)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _record(self, chunk: OutputChunk) -> None:
        channel = "stderr" if isinstance(chunk, StderrChunk) else "stdout"
        stamp = chunk.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(f"# {stamp} {channel} $ {chunk.command}\n")
            handle.write(chunk.text.rstrip("\n") + "\n")
