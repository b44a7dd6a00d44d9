"""Engine output cleanup, classification and payload decoding."""

from .payload import Decoded, Ok, ParseFailed, decode_payload
from .sanitize import LineClass, OutputLine, classify_result, classify_stderr, classify_stdout, sanitize

__all__ = [
    "Decoded",
    "LineClass",
    "Ok",
    "OutputLine",
    "ParseFailed",
    "classify_result",
    "classify_stderr",
    "classify_stdout",
    "decode_payload",
    "sanitize",
]
