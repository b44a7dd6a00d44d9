"""Sanitize and classify text captured from the engine."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import StrEnum

from rzterm.types import ExecutionResult

CSI_RE = re.compile(r"\x1b\[[0-9;?]*[a-zA-Z]")
LEGACY_CLEAR_SEQUENCES = ("[2K",)
NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7e\n\r\t]")

# UTF-8 box glyphs that were decoded as half-width katakana somewhere upstream.
MOJIBAKE_GLYPHS = {
    "￢ﾀﾕ": "-",
    "￢ﾔﾂ": "|",
    "￢ﾔﾌ": "+",
    "￢ﾔﾔ": "+",
}

NOISE_MARKERS = (
    "Neither hash nor gnu_hash",
    "rz_config_node_desc: assertion",
)


def _box_drawing_ascii(code_point: int) -> str:
    name = unicodedata.name(chr(code_point), "")
    if " AND " in name or "ARC" in name:
        return "+"
    if "VERTICAL" in name or " UP" in name or " DOWN" in name:
        return "|"
    return "-"


BOX_DRAWING_TABLE = str.maketrans({cp: _box_drawing_ascii(cp) for cp in range(0x2500, 0x2580)})


class LineClass(StrEnum):
    ERROR = "error"
    HELP = "help"
    WARNING = "warning"
    PLAIN = "plain"


@dataclass(frozen=True)
class OutputLine:
    text: str
    kind: LineClass = LineClass.PLAIN


def _sanitize_once(text: str) -> str:
    text = CSI_RE.sub("", text)
    for sequence in LEGACY_CLEAR_SEQUENCES:
        text = text.replace(sequence, "")
    text = text.translate(BOX_DRAWING_TABLE)
    for glyph, replacement in MOJIBAKE_GLYPHS.items():
        text = text.replace(glyph, replacement)
    return NON_PRINTABLE_RE.sub("", text)


def sanitize(text: str | bytes) -> str:
    """Strip control sequences and non-ASCII noise from engine output.

    Removing one sequence can splice the neighbours into a new one, so the
    pass repeats until the text stops changing. Every pass only shortens or
    ASCII-fies the text, which bounds the loop.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    while True:
        cleaned = _sanitize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def is_noise(line: str) -> bool:
    return any(marker in line for marker in NOISE_MARKERS)


def classify_stderr_line(line: str) -> LineClass:
    if line.startswith("ERROR:"):
        return LineClass.ERROR
    if line.startswith(("Usage:", "|")):
        return LineClass.HELP
    return LineClass.WARNING


def classify_stderr(text: str) -> list[OutputLine]:
    lines: list[OutputLine] = []
    for line in sanitize(text).splitlines():
        if not line.strip() or is_noise(line):
            continue
        lines.append(OutputLine(line, classify_stderr_line(line)))
    return lines


def classify_stdout(text: str) -> list[OutputLine]:
    cleaned = sanitize(text)
    if not cleaned.strip():
        return []
    return [OutputLine(line) for line in cleaned.rstrip("\n").split("\n")]


def classify_result(result: ExecutionResult) -> list[OutputLine]:
    """Lines for one result in display order: stderr first, then stdout."""
    if result.fault is not None:
        return [OutputLine(f"Error: {sanitize(result.fault)}", LineClass.ERROR)]
    return [*classify_stderr(result.stderr), *classify_stdout(result.stdout)]
