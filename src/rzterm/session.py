"""Session binding one terminal to one opened engine."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from rzterm.bridge.bus import OutputBus
from rzterm.bridge.dispatcher import CommandDispatcher
from rzterm.engine.base import AnalysisData, Engine, EngineConfig, EngineFile
from rzterm.output.payload import Decoded, decode_payload
from rzterm.terminal.history import HistoryLog
from rzterm.types import ExecutionResult


class Session:
    """Own one engine, its dispatcher and the command history."""

    def __init__(
        self,
        engine: Engine,
        history: HistoryLog | None = None,
        *,
        bus: OutputBus | None = None,
    ) -> None:
        self._engine = engine
        self._history = history if history is not None else HistoryLog()
        self._dispatcher = CommandDispatcher(engine, bus)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def history(self) -> HistoryLog:
        return self._history

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def bus(self) -> OutputBus:
        return self._dispatcher.bus

    @property
    def is_executing(self) -> bool:
        return self._dispatcher.busy

    @property
    def current_file(self) -> EngineFile | None:
        return self._engine.current_file

    @property
    def analysis(self) -> AnalysisData | None:
        return self._engine.analysis

    async def open(self, path: Path, config: EngineConfig | None = None) -> None:
        async with self._dispatcher.exclusive() as engine:
            await engine.open(path, config)

    async def close(self) -> None:
        async with self._dispatcher.exclusive() as engine:
            engine.close()
        logger.debug("session.closed")

    async def submit(self, command: str) -> ExecutionResult:
        return await self._dispatcher.submit(command)

    async def current_address(self) -> str:
        return await self._dispatcher.current_address()

    async def disassembly(self, address: int) -> str:
        result = await self.submit(f"aa;s {address:#x};pdfj")
        return result.stdout

    async def graph(self, address: int) -> Decoded:
        result = await self.submit(f"aa;s {address:#x};agfj")
        return decode_payload(result.stdout)

    async def hex_dump(self, address: int, length: int = 256) -> str:
        result = await self.submit(f"s {address:#x};pxj {length}")
        return result.stdout
