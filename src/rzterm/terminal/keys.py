"""Raw key decoding for the terminal line editor."""

from __future__ import annotations

import codecs
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

ESC = "\x1b"
CSI = ESC + "["


class KeyKind(StrEnum):
    CHAR = "char"
    INTERRUPT = "interrupt"
    SUBMIT = "submit"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    HOME = "home"
    END = "end"
    BACKSPACE = "backspace"
    DELETE_FORWARD = "delete_forward"
    HISTORY_PREV = "history_prev"
    HISTORY_NEXT = "history_next"
    IGNORED = "ignored"


@dataclass(frozen=True)
class KeyEvent:
    """One semantic key event. ``text`` is set only for ``KeyKind.CHAR``."""

    kind: KeyKind
    text: str = ""

    @classmethod
    def char(cls, text: str) -> KeyEvent:
        return cls(KeyKind.CHAR, text)


# Whole-chunk matches; anything not listed falls through to the printable check.
KEY_TABLE: dict[str, KeyKind] = {
    "\x03": KeyKind.INTERRUPT,
    "\r": KeyKind.SUBMIT,
    "\n": KeyKind.SUBMIT,
    CSI + "A": KeyKind.HISTORY_PREV,
    CSI + "B": KeyKind.HISTORY_NEXT,
    CSI + "D": KeyKind.MOVE_LEFT,
    CSI + "C": KeyKind.MOVE_RIGHT,
    CSI + "H": KeyKind.HOME,
    "\x01": KeyKind.HOME,
    CSI + "F": KeyKind.END,
    "\x05": KeyKind.END,
    "\x7f": KeyKind.BACKSPACE,
    "\b": KeyKind.BACKSPACE,
    CSI + "3~": KeyKind.DELETE_FORWARD,
    "\t": KeyKind.IGNORED,
}

IGNORED = KeyEvent(KeyKind.IGNORED)


def _is_printable(ch: str) -> bool:
    return ch >= " " and ch != "\x7f"


def decode_key(chunk: str | bytes) -> KeyEvent:
    """Decode one atomic input chunk into exactly one key event."""

    if isinstance(chunk, bytes):
        chunk = chunk.decode("utf-8", errors="replace")
    if not chunk:
        return IGNORED

    kind = KEY_TABLE.get(chunk)
    if kind is not None:
        return KeyEvent(kind)

    # A multi-character chunk without control bytes is pasted text.
    if all(_is_printable(ch) for ch in chunk):
        return KeyEvent.char(chunk)
    return IGNORED


def iter_keys(data: str) -> Iterator[str]:
    """Split one raw terminal read into per-key chunks.

    Escape sequences stay whole so an unknown sequence is ignored as a unit
    instead of leaking its tail as printable text. Consecutive printable
    characters are grouped into one chunk.
    """

    index = 0
    size = len(data)
    while index < size:
        ch = data[index]
        if ch == ESC:
            end = _escape_end(data, index)
            yield data[index:end]
            index = end
            continue
        if _is_printable(ch):
            end = index + 1
            while end < size and _is_printable(data[end]):
                end += 1
            yield data[index:end]
            index = end
            continue
        yield ch
        index += 1


def _escape_end(data: str, start: int) -> int:
    size = len(data)
    if start + 1 >= size:
        return size
    introducer = data[start + 1]
    if introducer == "[":
        # Parameter and intermediate bytes, then one final byte in 0x40-0x7e.
        index = start + 2
        while index < size and "\x20" <= data[index] <= "\x3f":
            index += 1
        return min(index + 1, size)
    if introducer == "O":
        return min(start + 3, size)
    return start + 2


def is_partial_escape(chunk: str) -> bool:
    """True when ``chunk`` is an escape sequence cut off before its final byte."""
    if not chunk.startswith(ESC):
        return False
    if len(chunk) == 1:
        return True
    if chunk[1] == "O":
        return len(chunk) == 2
    if chunk[1] == "[":
        return len(chunk) == 2 or not "\x40" <= chunk[-1] <= "\x7e"
    return False


class KeyStream:
    """Split successive terminal reads into key chunks.

    Bytes go through an incremental UTF-8 decoder so a character split across
    reads is joined rather than replaced. A trailing escape sequence without
    its final byte is held back and prefixed to the next read.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, data: str | bytes) -> list[str]:
        text = self._decoder.decode(data) if isinstance(data, bytes) else data
        chunks = list(iter_keys(self._pending + text))
        self._pending = ""
        if chunks and is_partial_escape(chunks[-1]):
            self._pending = chunks.pop()
        return chunks
