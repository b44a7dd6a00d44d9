"""Address-aware prompt rendering."""

from __future__ import annotations

import re

from .styles import BOLD_YELLOW, RESET

DEFAULT_ADDRESS = "0x00000000"
CLEAR_LINE = "\x1b[2K\r"
_ADDRESS_RE = re.compile(r"^(0x[0-9a-fA-F]+)")


def parse_address(text: str) -> str:
    """Extract the leading hex address from ``s`` output, or the default."""
    match = _ADDRESS_RE.match(text.strip())
    return match.group(1) if match else DEFAULT_ADDRESS


def render_prompt(address: str | None) -> str:
    return f"{BOLD_YELLOW}[{address or DEFAULT_ADDRESS}]>{RESET} "
