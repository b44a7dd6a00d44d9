"""Persistent command history."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from loguru import logger

from rzterm.terminal.history import DEFAULT_MAX_SIZE, HistoryLog

DEFAULT_PERSIST_LIMIT = 100


class FileHistoryStore(HistoryLog):
    """History log that mirrors its most recent entries to a JSON file."""

    def __init__(
        self,
        path: Path,
        *,
        max_size: int = DEFAULT_MAX_SIZE,
        persist_limit: int = DEFAULT_PERSIST_LIMIT,
    ) -> None:
        super().__init__(max_size=max_size)
        self.path = path
        self._persist_limit = persist_limit
        self._lock = threading.Lock()
        self.load()

    def load(self) -> None:
        with self._lock:
            commands = self._read_commands()
        # Oldest first, so recency ends up in the stored order.
        super().clear()
        for command in reversed(commands):
            super().record(command)

    def save(self) -> bool:
        """Write the persisted slice; on failure the in-memory log is kept as is."""
        with self._lock:
            payload = {"commands": self.entries()[: self._persist_limit]}
            tmp_path = self.path.with_suffix(".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
                tmp_path.replace(self.path)
            except OSError:
                logger.opt(exception=True).warning("history.save_failed path={}", self.path)
                return False
        return True

    def record(self, command: str) -> None:
        if not command.strip():
            return
        super().record(command)
        self.save()

    def clear(self) -> None:
        super().clear()
        self.save()

    def _read_commands(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("history.load_failed path={}", self.path)
            return []
        commands = payload.get("commands") if isinstance(payload, dict) else None
        if not isinstance(commands, list):
            return []
        return [command for command in commands if isinstance(command, str)]
