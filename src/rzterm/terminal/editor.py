"""Single-line editor state machine with minimal terminal redraws."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .history import HistoryLog, HistoryNavigator
from .keys import KeyEvent, KeyKind

CURSOR_LEFT = "\x1b[D"
CURSOR_RIGHT = "\x1b[C"


def cursor_left(columns: int) -> str:
    return f"\x1b[{columns}D" if columns > 0 else ""


def cursor_right(columns: int) -> str:
    return f"\x1b[{columns}C" if columns > 0 else ""


@dataclass(frozen=True)
class EditorAction:
    """Outcome of one key event.

    ``echo`` is written to the terminal as-is. ``recall`` asks for a full line
    redraw: clear the line, render the prompt, then write the recalled text.
    ``rearm`` means the line is finished and a fresh prompt is due, after
    ``submitted`` (if any) has been executed.
    """

    echo: str = ""
    recall: str | None = None
    submitted: str | None = None
    rearm: bool = False


NO_ACTION = EditorAction()


class LineEditor:
    """Edit buffer plus cursor offset, driven by decoded key events."""

    def __init__(self, history: HistoryLog) -> None:
        self.buffer = ""
        self.cursor = 0
        self.history = history
        self.navigator = HistoryNavigator(history)

    def apply(self, event: KeyEvent) -> EditorAction:
        handler = _HANDLERS.get(event.kind)
        if handler is None:
            return NO_ACTION
        return handler(self, event)

    def _reset(self) -> None:
        self.buffer = ""
        self.cursor = 0

    def _insert(self, event: KeyEvent) -> EditorAction:
        before = self.buffer[: self.cursor]
        after = self.buffer[self.cursor :]
        self.buffer = before + event.text + after
        self.cursor += len(event.text)
        return EditorAction(echo=event.text + after + cursor_left(len(after)))

    def _backspace(self, _event: KeyEvent) -> EditorAction:
        if self.cursor == 0:
            return NO_ACTION
        after = self.buffer[self.cursor :]
        self.buffer = self.buffer[: self.cursor - 1] + after
        self.cursor -= 1
        return EditorAction(echo="\b" + after + " " + cursor_left(len(after) + 1))

    def _delete_forward(self, _event: KeyEvent) -> EditorAction:
        if self.cursor >= len(self.buffer):
            return NO_ACTION
        after = self.buffer[self.cursor + 1 :]
        self.buffer = self.buffer[: self.cursor] + after
        return EditorAction(echo=after + " " + cursor_left(len(after) + 1))

    def _move_left(self, _event: KeyEvent) -> EditorAction:
        if self.cursor == 0:
            return NO_ACTION
        self.cursor -= 1
        return EditorAction(echo=CURSOR_LEFT)

    def _move_right(self, _event: KeyEvent) -> EditorAction:
        if self.cursor >= len(self.buffer):
            return NO_ACTION
        self.cursor += 1
        return EditorAction(echo=CURSOR_RIGHT)

    def _home(self, _event: KeyEvent) -> EditorAction:
        delta = self.cursor
        self.cursor = 0
        return EditorAction(echo=cursor_left(delta)) if delta else NO_ACTION

    def _end(self, _event: KeyEvent) -> EditorAction:
        delta = len(self.buffer) - self.cursor
        self.cursor = len(self.buffer)
        return EditorAction(echo=cursor_right(delta)) if delta else NO_ACTION

    def _interrupt(self, _event: KeyEvent) -> EditorAction:
        self._reset()
        self.navigator.reset()
        return EditorAction(echo="^C\r\n", rearm=True)

    def _submit(self, _event: KeyEvent) -> EditorAction:
        command = self.buffer.strip()
        self._reset()
        if not command:
            return EditorAction(echo="\r\n", rearm=True)
        self.history.record(command)
        self.navigator.reset()
        logger.debug("editor.submit command={!r}", command)
        return EditorAction(echo="\r\n", submitted=command, rearm=True)

    def _recall(self, text: str | None) -> EditorAction:
        if text is None:
            return NO_ACTION
        self.buffer = text
        self.cursor = len(text)
        return EditorAction(recall=text)

    def _history_prev(self, _event: KeyEvent) -> EditorAction:
        return self._recall(self.navigator.previous())

    def _history_next(self, _event: KeyEvent) -> EditorAction:
        return self._recall(self.navigator.next())


_HANDLERS = {
    KeyKind.CHAR: LineEditor._insert,
    KeyKind.BACKSPACE: LineEditor._backspace,
    KeyKind.DELETE_FORWARD: LineEditor._delete_forward,
    KeyKind.MOVE_LEFT: LineEditor._move_left,
    KeyKind.MOVE_RIGHT: LineEditor._move_right,
    KeyKind.HOME: LineEditor._home,
    KeyKind.END: LineEditor._end,
    KeyKind.INTERRUPT: LineEditor._interrupt,
    KeyKind.SUBMIT: LineEditor._submit,
    KeyKind.HISTORY_PREV: LineEditor._history_prev,
    KeyKind.HISTORY_NEXT: LineEditor._history_next,
}
