"""Analysis engine contract consumed by the execution bridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class EngineConfig:
    """Options applied when a file is opened.

    ``io_cache`` of ``None`` leaves the engine default untouched.
    ``analysis_depth`` picks ``aa`` (1), ``aaa`` (2) or ``aaaa`` (3+).
    """

    io_cache: bool | None = None
    analysis_depth: int = 1


@dataclass(frozen=True)
class EngineFile:
    name: str
    path: Path
    size: int


@dataclass
class AnalysisData:
    """Structured results gathered while a file is opened."""

    functions: list[Any] = field(default_factory=list)
    strings: list[Any] = field(default_factory=list)
    imports: list[Any] = field(default_factory=list)
    sections: list[Any] = field(default_factory=list)


def analysis_command(depth: int) -> str:
    if depth >= 3:
        return "aaaa"
    if depth >= 2:
        return "aaa"
    return "aa"


@runtime_checkable
class Engine(Protocol):
    """Synchronous, stateful command executor.

    Only ``open`` suspends; every other call blocks until the engine is done.
    Callers must never overlap two calls on one engine.
    """

    @property
    def is_open(self) -> bool: ...

    @property
    def current_file(self) -> EngineFile | None: ...

    @property
    def analysis(self) -> AnalysisData | None: ...

    async def open(self, path: Path, config: EngineConfig | None = None) -> None: ...

    def execute_command(self, command: str) -> str: ...

    def last_stderr(self) -> str: ...

    def current_address(self) -> str: ...

    def close(self) -> None: ...
