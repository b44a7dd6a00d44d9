"""rzterm CLI bootstrap."""

from __future__ import annotations

from rzterm.cli import app

if __name__ == "__main__":
    app()
