from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from rzterm.engine.base import AnalysisData, EngineConfig, EngineFile
from rzterm.terminal.prompt import DEFAULT_ADDRESS


class FakeEngine:
    """In-process engine double that tracks call overlap."""

    def __init__(self) -> None:
        self.stdout: dict[str, str] = {}
        self.stderr: dict[str, str] = {}
        self.faults: dict[str, Exception] = {}
        self.delay = 0.0
        self.calls: list[str] = []
        self.address = "0x00001000"
        self.address_queries = 0
        self.opened: list[tuple[Path, EngineConfig | None]] = []
        self.active = 0
        self.max_active = 0
        self._file: EngineFile | None = None
        self._analysis: AnalysisData | None = None
        self._last_stderr = ""
        self._guard = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._file is not None

    @property
    def current_file(self) -> EngineFile | None:
        return self._file

    @property
    def analysis(self) -> AnalysisData | None:
        return self._analysis

    async def open(self, path: Path, config: EngineConfig | None = None) -> None:
        self.opened.append((path, config))
        self._file = EngineFile(name=path.name, path=path, size=0)
        self._analysis = AnalysisData(functions=[{"name": "main"}], strings=[{"string": "a"}, {"string": "b"}])

    def execute_command(self, command: str) -> str:
        self._enter()
        try:
            self.calls.append(command)
            if self.delay:
                time.sleep(self.delay)
            if command in self.faults:
                raise self.faults[command]
            if command.startswith("s "):
                self.address = command[2:].strip()
            self._last_stderr = self.stderr.get(command, "")
            return self.stdout.get(command, "")
        finally:
            self._leave()

    def last_stderr(self) -> str:
        return self._last_stderr

    def current_address(self) -> str:
        self._enter()
        try:
            self.address_queries += 1
            if self.delay:
                time.sleep(self.delay)
            return self.address if self._file is not None else DEFAULT_ADDRESS
        finally:
            self._leave()

    def close(self) -> None:
        self._file = None
        self._analysis = None

    def _enter(self) -> None:
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)

    def _leave(self) -> None:
        with self._guard:
            self.active -= 1


class RecordingWriter:
    def __init__(self) -> None:
        self.chunks: list[str] = []

    def write(self, text: str) -> None:
        self.chunks.append(text)

    @property
    def text(self) -> str:
        return "".join(self.chunks)

    def reset(self) -> None:
        self.chunks.clear()


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


FAKE_RIZIN = """#!/bin/sh
cmd=""
while [ $# -gt 0 ]; do
  case "$1" in
    -c) cmd="$2"; shift 2 ;;
    -e) echo "eval:$2" >> "$0.log"; shift 2 ;;
    -q) shift ;;
    *) shift ;;
  esac
done
echo "cmd:$cmd" >> "$0.log"
case "$cmd" in
  *aflj) echo 'loading...'; echo '[{"name":"main","offset":4096}]' ;;
  izzj) echo '[{"string":"hello"}]' ;;
  iij) echo '[]' ;;
  iSj) echo 'no sections' ;;
  s) echo '0x00401000' ;;
  *) echo "ran:$cmd"; echo "ERROR: invalid command $cmd" >&2; echo 'Neither hash nor gnu_hash table found' >&2 ;;
esac
"""


@pytest.fixture
def fake_rizin(tmp_path: Path) -> Path:
    script = tmp_path / "bin" / "rizin"
    script.parent.mkdir()
    script.write_text(FAKE_RIZIN, encoding="utf-8")
    script.chmod(0o755)
    return script


@pytest.fixture
def binary(tmp_path: Path) -> Path:
    target = tmp_path / "sample.bin"
    target.write_bytes(b"\x7fELF" + b"\x00" * 60)
    return target
