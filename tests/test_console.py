from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from rzterm.errors import EngineFault
from rzterm.history_store import FileHistoryStore
from rzterm.session import Session
from rzterm.terminal.console import TerminalConsole
from rzterm.terminal.history import HistoryLog
from rzterm.terminal.prompt import CLEAR_LINE, render_prompt
from rzterm.terminal.styles import RED, YELLOW, styled

PROMPT = render_prompt("0x00001000")


async def _connected(fake_engine, writer) -> TerminalConsole:
    session = Session(fake_engine)
    await session.open(Path("sample.bin"))
    console = TerminalConsole(session, writer)
    await console.connect()
    writer.reset()
    return console


@pytest.mark.asyncio
async def test_connect_announces_file_and_prompt(fake_engine, writer) -> None:
    session = Session(fake_engine)
    await session.open(Path("sample.bin"))
    console = TerminalConsole(session, writer)

    await console.connect()

    assert console.connected
    assert "Connected to rizin!" in writer.text
    assert "File: sample.bin" in writer.text
    assert "Functions: 1, Strings: 2" in writer.text
    assert writer.text.endswith(PROMPT)


@pytest.mark.asyncio
async def test_typed_command_runs_rewritten(fake_engine, writer) -> None:
    fake_engine.stdout["aa;afl"] = "0x1000 main\n0x1040 helper\n"
    console = await _connected(fake_engine, writer)

    await console.feed_stream("afl\r")

    assert fake_engine.calls == ["aa;afl"]
    assert writer.text == "afl\r\n" + "0x1000 main\r\n" + "0x1040 helper\r\n" + PROMPT
    assert console.session.history.entries() == ["afl"]


@pytest.mark.asyncio
async def test_stderr_is_styled_and_shown_first(fake_engine, writer) -> None:
    fake_engine.stdout["iz"] = "str\n"
    fake_engine.stderr["iz"] = "ERROR: bad\nWARN: slow\nNeither hash nor gnu_hash table found\n"
    console = await _connected(fake_engine, writer)

    await console.feed_stream("iz\r")

    assert writer.text == (
        "iz\r\n"
        + styled("ERROR: bad", RED)
        + "\r\n"
        + styled("WARN: slow", YELLOW)
        + "\r\n"
        + "str\r\n"
        + PROMPT
    )


@pytest.mark.asyncio
async def test_prompt_follows_seek(fake_engine, writer) -> None:
    console = await _connected(fake_engine, writer)

    await console.feed_stream("s 0x2000\r")

    assert fake_engine.calls == ["s 0x2000"]
    assert writer.text.endswith(render_prompt("0x2000"))


@pytest.mark.asyncio
async def test_fault_is_reported_and_terminal_continues(fake_engine, writer) -> None:
    fake_engine.faults["px"] = EngineFault("boom")
    fake_engine.stdout["iz"] = "ok\n"
    console = await _connected(fake_engine, writer)

    await console.feed_stream("px\r")
    assert styled("Error: boom", RED) + "\r\n" + PROMPT in writer.text

    writer.reset()
    await console.feed_stream("iz\r")
    assert writer.text == "iz\r\nok\r\n" + PROMPT


@pytest.mark.asyncio
async def test_history_recall_redraws_line(fake_engine, writer) -> None:
    console = await _connected(fake_engine, writer)
    await console.feed_stream("iz\r")
    await console.feed_stream("ii\r")
    writer.reset()

    await console.feed("\x1b[A")
    await console.feed("\x1b[A")

    assert writer.chunks == [CLEAR_LINE + PROMPT + "ii", CLEAR_LINE + PROMPT + "iz"]
    assert console.editor.buffer == "iz"

    writer.reset()
    await console.feed("\x1b[B")
    await console.feed("\x1b[B")
    assert writer.chunks == [CLEAR_LINE + PROMPT + "ii", CLEAR_LINE + PROMPT]
    assert console.editor.buffer == ""


@pytest.mark.asyncio
async def test_interrupt_discards_line(fake_engine, writer) -> None:
    console = await _connected(fake_engine, writer)

    await console.feed_stream("px 16")
    await console.feed("\x03")

    assert console.editor.buffer == ""
    assert writer.text == "px 16^C\r\n" + PROMPT
    assert fake_engine.calls == []


@pytest.mark.asyncio
async def test_blank_submit_only_rearms(fake_engine, writer) -> None:
    console = await _connected(fake_engine, writer)

    await console.feed_stream("   \r")

    assert fake_engine.calls == []
    assert writer.text.endswith("\r\n" + PROMPT)


@pytest.mark.asyncio
async def test_quit_command_requests_exit(fake_engine, writer) -> None:
    console = await _connected(fake_engine, writer)

    await console.feed_stream("q\r")

    assert console.exit_requested
    assert fake_engine.calls == []


@pytest.mark.asyncio
async def test_keys_typed_during_execution_are_type_ahead(fake_engine, writer) -> None:
    fake_engine.delay = 0.05
    fake_engine.stdout["iz"] = "done\n"
    console = await _connected(fake_engine, writer)

    task = asyncio.create_task(console.feed_stream("iz\r"))
    await asyncio.sleep(0.01)
    await console.feed("x")
    await task

    assert writer.text == "iz\r\ndone\r\n" + PROMPT + "x"
    assert console.editor.buffer == "x"
    assert fake_engine.max_active == 1


@pytest.mark.asyncio
async def test_send_input(fake_engine, writer) -> None:
    fake_engine.stdout["iz"] = "hello\n"
    console = await _connected(fake_engine, writer)

    result = await console.send_input("iz\n")

    assert result is not None
    assert result.stdout == "hello\n"
    assert writer.text == "hello\r\n" + PROMPT
    assert await console.send_input("\n") is None
    assert await console.send_input("exit") is None
    assert console.exit_requested


@pytest.mark.asyncio
async def test_escape_sequence_split_across_reads_recalls_history(fake_engine, writer) -> None:
    session = Session(fake_engine, HistoryLog(["afl"]))
    await session.open(Path("sample.bin"))
    console = TerminalConsole(session, writer)
    await console.connect()
    writer.reset()

    await console.feed_stream("\x1b")
    assert writer.text == ""
    await console.feed_stream("[A")

    assert console.editor.buffer == "afl"
    assert writer.text == CLEAR_LINE + PROMPT + "afl"


@pytest.mark.asyncio
async def test_submit_survives_unwritable_history(fake_engine, writer, tmp_path: Path) -> None:
    blocker = tmp_path / "home"
    blocker.write_text("", encoding="utf-8")
    fake_engine.stdout["iz"] = "ok\n"
    session = Session(fake_engine, FileHistoryStore(blocker / "history.json"))
    await session.open(Path("sample.bin"))
    console = TerminalConsole(session, writer)

    await console.feed_stream("iz\r")

    assert fake_engine.calls == ["iz"]
    assert session.history.entries() == ["iz"]
    assert "ok\r\n" in writer.text
