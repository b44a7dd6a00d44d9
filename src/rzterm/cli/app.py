"""rzterm command-line interface."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from rzterm.config import Settings, get_settings
from rzterm.engine import EngineConfig, RizinEngine
from rzterm.errors import ConfigurationError, EngineError
from rzterm.history_store import FileHistoryStore
from rzterm.logging_utils import configure_logging
from rzterm.output.sanitize import classify_result
from rzterm.session import Session
from rzterm.terminal.console import TerminalConsole
from rzterm.terminal.styles import RED, render_line, styled
from rzterm.transcript import Transcript

from .live import StreamWriter, run_lines, run_raw

app = typer.Typer(
    name="rzterm",
    help="Interactive rizin terminal.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _exit_with_error(message: str) -> NoReturn:
    typer.echo(styled(message, RED), err=True)
    raise typer.Exit(1)


def _load_settings(**overrides: object) -> Settings:
    try:
        return get_settings(**overrides)
    except ConfigurationError as exc:
        _exit_with_error(f"Error: {exc}")


def _engine_config(settings: Settings, analysis_depth: Optional[int], io_cache: Optional[bool]) -> EngineConfig:
    return EngineConfig(
        io_cache=settings.io_cache if io_cache is None else io_cache,
        analysis_depth=analysis_depth or settings.analysis_depth,
    )


def _create_session(settings: Settings) -> Session:
    history = FileHistoryStore(
        settings.history_path(),
        max_size=settings.history_max_size,
        persist_limit=settings.history_persist_limit,
    )
    engine = RizinEngine(settings.rizin_path, auto_analyze_threshold=settings.auto_analyze_threshold)
    return Session(engine, history)


async def _interactive(
    settings: Settings,
    session: Session,
    file: Path,
    config: EngineConfig,
    transcript: Optional[Path],
) -> int:
    raw = sys.stdin.isatty()
    # Raw mode logs to a file; stderr output would tear the edit line.
    log_file = (settings.log_file or settings.resolve_home() / "rzterm.log") if raw else settings.log_file
    configure_logging(profile="terminal", level=settings.log_level, log_file=log_file)
    writer = StreamWriter(sys.stdout)
    console = TerminalConsole(session, writer)
    recorder = Transcript(transcript) if transcript else None
    if recorder is not None:
        recorder.attach(session.bus)

    console.welcome()
    try:
        await session.open(file, config)
    except EngineError as exc:
        console.writeln(styled(f"Error: {exc}", RED))
        return 1

    try:
        await console.connect()
        if raw:
            await run_raw(console, sys.stdin)
        else:
            await run_lines(console, sys.stdin)
    finally:
        await session.close()
        if recorder is not None:
            recorder.detach()
    return 0


@app.command("open")
def open_file(
    file: Path = typer.Argument(..., help="Binary to analyze"),  # noqa: B008
    analysis_depth: Optional[int] = typer.Option(None, "--depth", "-d", min=1, max=4, help="Analysis depth on open"),
    io_cache: Optional[bool] = typer.Option(None, "--io-cache/--no-io-cache", help="Enable rizin io.cache"),
    rizin: Optional[str] = typer.Option(None, "--rizin", help="rizin executable"),
    transcript: Optional[Path] = typer.Option(None, "--transcript", help="Append engine output to this file"),  # noqa: B008
) -> None:
    """Open FILE in an interactive rizin terminal."""
    overrides = {"rizin_path": rizin} if rizin else {}
    settings = _load_settings(**overrides)
    session = _create_session(settings)
    config = _engine_config(settings, analysis_depth, io_cache)
    code = asyncio.run(_interactive(settings, session, file, config, transcript))
    if code:
        raise typer.Exit(code)


@app.command()
def run(
    file: Path = typer.Argument(..., help="Binary to analyze"),  # noqa: B008
    command: str = typer.Argument(..., help="rizin command, ';' separated"),
    analysis_depth: Optional[int] = typer.Option(None, "--depth", "-d", min=1, max=4, help="Analysis depth on open"),
    rizin: Optional[str] = typer.Option(None, "--rizin", help="rizin executable"),
) -> None:
    """Run one command against FILE and print its classified output."""
    overrides = {"rizin_path": rizin} if rizin else {}
    settings = _load_settings(**overrides)
    session = _create_session(settings)
    config = _engine_config(settings, analysis_depth, None)

    async def _run_once() -> bool:
        await session.open(file, config)
        try:
            result = await session.submit(command)
        finally:
            await session.close()
        for line in classify_result(result):
            typer.echo(render_line(line))
        return result.ok

    try:
        ok = asyncio.run(_run_once())
    except EngineError as exc:
        _exit_with_error(f"Error: {exc}")
    if not ok:
        raise typer.Exit(1)


@app.command()
def history(
    clear: bool = typer.Option(False, "--clear", help="Forget all recorded commands"),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Rows to show"),
) -> None:
    """Show recorded commands, most recent first."""
    settings = _load_settings()
    store = FileHistoryStore(
        settings.history_path(),
        max_size=settings.history_max_size,
        persist_limit=settings.history_persist_limit,
    )
    console = Console()
    if clear:
        store.clear()
        console.print("[yellow]History cleared.[/yellow]")
        return

    entries = store.entries()
    if not entries:
        console.print("[dim](no history)[/dim]")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("command", style="cyan")
    for index, command in enumerate(entries[:limit], start=1):
        table.add_row(str(index), command)
    console.print(table)
