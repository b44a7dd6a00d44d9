"""SGR styling for terminal output."""

from __future__ import annotations

from rzterm.output.sanitize import LineClass, OutputLine

RESET = "\x1b[0m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
CYAN = "\x1b[36m"
GREY = "\x1b[90m"
BOLD_YELLOW = "\x1b[1;33m"
BOLD_CYAN = "\x1b[1;36m"

LINE_STYLES: dict[LineClass, str] = {
    LineClass.ERROR: RED,
    LineClass.HELP: CYAN,
    LineClass.WARNING: YELLOW,
}


def styled(text: str, style: str) -> str:
    return f"{style}{text}{RESET}"


def render_line(line: OutputLine) -> str:
    """Render one classified line with its display style. Plain lines are unstyled."""
    style = LINE_STYLES.get(line.kind)
    if style is None:
        return line.text
    return styled(line.text, style)
