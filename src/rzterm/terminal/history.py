"""Command history log and up/down recall."""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_MAX_SIZE = 1000
SENTINEL = -1


class HistoryLog:
    """Bounded most-recent-first command log without duplicates."""

    def __init__(self, entries: Iterable[str] = (), *, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self._max_size = max_size
        self._entries: list[str] = []
        for command in reversed(list(entries)):
            self.record(command)

    @property
    def max_size(self) -> int:
        return self._max_size

    def record(self, command: str) -> None:
        if not command.strip():
            return
        filtered = [entry for entry in self._entries if entry != command]
        self._entries = [command, *filtered][: self._max_size]

    def entries(self) -> list[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]


class HistoryNavigator:
    """Walk a ``HistoryLog`` with up/down keys.

    ``index`` is ``SENTINEL`` while the buffer holds text the user typed;
    otherwise it points at the recalled entry.
    """

    def __init__(self, log: HistoryLog) -> None:
        self._log = log
        self.index = SENTINEL

    @property
    def navigating(self) -> bool:
        return self.index != SENTINEL

    def reset(self) -> None:
        self.index = SENTINEL

    def previous(self) -> str | None:
        """Step toward older entries. Returns the text to load, or None at the oldest."""
        if self.index >= len(self._log) - 1:
            return None
        self.index += 1
        return self._log[self.index]

    def next(self) -> str | None:
        """Step toward newer entries; leaving the newest returns an empty line."""
        if self.index == SENTINEL:
            return None
        # The log may have shrunk underneath a recalled entry.
        newer = min(self.index, len(self._log)) - 1
        if newer < 0:
            self.index = SENTINEL
            return ""
        self.index = newer
        return self._log[newer]
