"""Application-level exception types for rzterm."""

from __future__ import annotations


class RzTermError(Exception):
    """Base exception for rzterm."""


class ConfigurationError(RzTermError):
    """Base exception for configuration and startup validation errors."""


class EngineError(RzTermError):
    """Base exception for analysis engine failures."""


class EngineUnavailableError(EngineError):
    """Raised when the rizin executable cannot be found or started."""


class EngineNotOpenError(EngineError):
    """Raised when a command reaches an engine with no file loaded."""


class EngineFault(EngineError):
    """Raised when one engine invocation fails.

    The dispatcher catches these and turns them into a single error line,
    so a fault never ends the session.
    """
