"""Framework-neutral data types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExecutionResult:
    """Captured output of exactly one engine invocation."""

    command: str
    dispatched: str
    stdout: str = ""
    stderr: str = ""
    fault: str | None = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    @property
    def rewritten(self) -> bool:
        return self.dispatched != self.command
