"""rizin command-line engine adapter."""

from __future__ import annotations

import asyncio
import shutil
import subprocess
from pathlib import Path

from loguru import logger

from rzterm.config import AUTO_ANALYZE_THRESHOLD
from rzterm.errors import EngineError, EngineFault, EngineNotOpenError, EngineUnavailableError
from rzterm.output.payload import decode_list
from rzterm.output.sanitize import sanitize
from rzterm.terminal.prompt import DEFAULT_ADDRESS, parse_address

from .base import AnalysisData, EngineConfig, EngineFile, analysis_command

# Plain, non-interactive output on every invocation.
BASE_EVALS = (
    "scr.color=0",
    "scr.interactive=false",
    "scr.prompt=false",
    "scr.utf8=false",
    "scr.utf8.curvy=false",
)


class RizinEngine:
    """Run each command as one ``rizin -q -c`` invocation against the open file."""

    def __init__(
        self,
        rizin_path: str = "rizin",
        *,
        auto_analyze_threshold: int = AUTO_ANALYZE_THRESHOLD,
    ) -> None:
        self._rizin_path = rizin_path
        self._auto_analyze_threshold = auto_analyze_threshold
        self._file: EngineFile | None = None
        self._analysis: AnalysisData | None = None
        self._evals: list[str] = list(BASE_EVALS)
        self._last_stderr = ""

    @property
    def is_open(self) -> bool:
        return self._file is not None

    @property
    def current_file(self) -> EngineFile | None:
        return self._file

    @property
    def analysis(self) -> AnalysisData | None:
        return self._analysis

    def resolve_executable(self) -> str:
        executable = shutil.which(self._rizin_path)
        if executable is None:
            raise EngineUnavailableError(f"rizin executable not found: {self._rizin_path}")
        return executable

    async def open(self, path: Path, config: EngineConfig | None = None) -> None:
        """Open ``path`` and gather the function, string, import and section lists.

        Any previously opened file is closed first. Each engine call runs in a
        worker thread so the event loop keeps serving input between stages.
        """
        config = config or EngineConfig()
        self.close()
        self.resolve_executable()
        path = path.expanduser().resolve()
        if not path.is_file():
            raise EngineError(f"file not found: {path}")

        self._file = EngineFile(name=path.name, path=path, size=path.stat().st_size)
        self._analysis = AnalysisData()
        logger.info("engine.open file={} size={}", path, self._file.size)

        if config.io_cache is not None:
            setting = f"io.cache={str(config.io_cache).lower()}"
            await asyncio.to_thread(self._run, f"e {setting}")
            self._evals.append(setting)

        if self._file.size < self._auto_analyze_threshold:
            command = f"{analysis_command(config.analysis_depth)};aflj"
        else:
            logger.info("engine.open.skip_analysis size={}", self._file.size)
            command = "aflj"
        self._analysis.functions = decode_list(await asyncio.to_thread(self._run, command))

        await asyncio.sleep(0)
        self._analysis.strings = decode_list(await asyncio.to_thread(self._run, "izzj"))
        await asyncio.sleep(0)
        self._analysis.imports = decode_list(await asyncio.to_thread(self._run, "iij"))
        await asyncio.sleep(0)
        self._analysis.sections = decode_list(await asyncio.to_thread(self._run, "iSj"))
        logger.info(
            "engine.open.done functions={} strings={} imports={} sections={}",
            len(self._analysis.functions),
            len(self._analysis.strings),
            len(self._analysis.imports),
            len(self._analysis.sections),
        )

    def execute_command(self, command: str) -> str:
        if self._file is None:
            raise EngineNotOpenError("No file loaded")
        return self._run(command)

    def last_stderr(self) -> str:
        return self._last_stderr

    def current_address(self) -> str:
        if self._file is None:
            return DEFAULT_ADDRESS
        try:
            return parse_address(self._run("s"))
        except EngineError:
            logger.opt(exception=True).debug("engine.address.failed")
            return DEFAULT_ADDRESS

    def close(self) -> None:
        if self._file is None:
            return
        logger.info("engine.close file={}", self._file.path)
        self._file = None
        self._analysis = None
        self._evals = list(BASE_EVALS)
        self._last_stderr = ""

    def build_args(self, command: str) -> list[str]:
        if self._file is None:
            raise EngineNotOpenError("No file loaded")
        args = [self.resolve_executable()]
        for setting in self._evals:
            args.extend(["-e", setting])
        args.extend(["-q", "-c", command, str(self._file.path)])
        return args

    def _run(self, command: str) -> str:
        args = self.build_args(command)
        self._last_stderr = ""
        try:
            # Commands come from the analyst's own terminal.
            result = subprocess.run(args, capture_output=True, check=False)  # noqa: S603
        except (OSError, subprocess.SubprocessError) as exc:
            raise EngineFault(f"execution failed: {exc!s}") from exc

        self._last_stderr = sanitize(result.stderr or b"")
        if result.returncode != 0:
            logger.debug("engine.exit command={!r} code={}", command, result.returncode)
        return sanitize(result.stdout or b"")
