import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rzterm.cli.app import app


@pytest.fixture
def env(tmp_path: Path) -> dict[str, str]:
    return {"RZTERM_HOME": str(tmp_path / "home"), "RZTERM_LOG_LEVEL": "ERROR"}


def test_history_lists_and_clears(tmp_path: Path, env: dict[str, str]) -> None:
    path = tmp_path / "home" / "history.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"commands": ["pdf @ main", "afl"]}), encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["history"], env=env)
    assert result.exit_code == 0
    assert "pdf @ main" in result.output
    assert "afl" in result.output

    result = runner.invoke(app, ["history", "--clear"], env=env)
    assert result.exit_code == 0
    assert "History cleared." in result.output
    assert json.loads(path.read_text(encoding="utf-8")) == {"commands": []}

    result = runner.invoke(app, ["history"], env=env)
    assert "(no history)" in result.output


def test_run_prints_stderr_before_stdout(fake_rizin: Path, binary: Path, env: dict[str, str]) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["run", str(binary), "px 16", "--rizin", str(fake_rizin)], env=env)

    assert result.exit_code == 0
    assert "Neither hash" not in result.output
    error_at = result.output.index("ERROR: invalid command px 16")
    output_at = result.output.index("ran:px 16")
    assert error_at < output_at


def test_run_reports_missing_file(fake_rizin: Path, tmp_path: Path, env: dict[str, str]) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["run", str(tmp_path / "nope.bin"), "iz", "--rizin", str(fake_rizin)], env=env)

    assert result.exit_code == 1
    assert "file not found" in result.output


def test_open_reads_commands_from_piped_stdin(
    fake_rizin: Path, binary: Path, tmp_path: Path, env: dict[str, str]
) -> None:
    transcript = tmp_path / "transcript.txt"
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["open", str(binary), "--rizin", str(fake_rizin), "--transcript", str(transcript)],
        input="iz\nquit\npx\n",
        env=env,
    )

    assert result.exit_code == 0
    assert "Connected to rizin!" in result.output
    assert "File: sample.bin" in result.output
    assert "ran:iz" in result.output
    assert "ran:px" not in result.output
    assert "[0x00401000]>" in result.output
    assert "stdout $ iz" in transcript.read_text(encoding="utf-8")


def test_open_reports_missing_executable(tmp_path: Path, binary: Path, env: dict[str, str]) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["open", str(binary), "--rizin", str(tmp_path / "missing-rizin")],
        input="",
        env=env,
    )

    assert result.exit_code == 1
    assert "rizin executable not found" in result.output


def test_invalid_settings_exit_cleanly(env: dict[str, str]) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["history"], env={**env, "RZTERM_ANALYSIS_DEPTH": "9"})

    assert result.exit_code == 1
    assert "invalid settings: analysis_depth" in result.output
