"""Output bus event models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TypeAlias


@dataclass(frozen=True)
class StdoutChunk:
    """Sanitized standard output captured from one engine invocation."""

    command: str
    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class StderrChunk:
    """Sanitized diagnostics captured from one engine invocation."""

    command: str
    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


OutputChunk: TypeAlias = StdoutChunk | StderrChunk
