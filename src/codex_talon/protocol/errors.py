"""Exception types raised by the Talon protocol layer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class TalonError(RuntimeError):
    """Base class for every failure surfaced by the protocol layer."""


class TalonPathError(TalonError):
    """Raised when the Talon directory cannot be located or created."""


class TalonIOError(TalonError):
    """Raised when a request or response file cannot be read or written."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class RequestParseError(TalonError):
    """Raised when a request document is malformed or names an unknown command."""

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        if source:
            message = f"failed to parse Talon request at {source}: {message}"
        super().__init__(message)
        self.source = source


class StateFormatError(TalonError):
    """Raised when an editor state document has fields of the wrong type."""


class ResponseFormatError(TalonError):
    """Raised when a response document cannot be decoded."""
