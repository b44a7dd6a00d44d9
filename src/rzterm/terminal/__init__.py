"""Terminal protocol layer: key decoding, line editing, history and prompt."""

from .editor import EditorAction, LineEditor
from .history import SENTINEL, HistoryLog, HistoryNavigator
from .keys import KeyEvent, KeyKind, KeyStream, decode_key, iter_keys
from .prompt import DEFAULT_ADDRESS, parse_address, render_prompt

__all__ = [
    "DEFAULT_ADDRESS",
    "SENTINEL",
    "EditorAction",
    "HistoryLog",
    "HistoryNavigator",
    "KeyEvent",
    "KeyKind",
    "KeyStream",
    "LineEditor",
    "decode_key",
    "iter_keys",
    "parse_address",
    "render_prompt",
]
