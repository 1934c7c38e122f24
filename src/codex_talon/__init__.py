"""Talon command protocol bridge for a terminal composer."""

__all__ = [
    "adapters",
    "cli",
    "config",
    "protocol",
    "runtime",
    "session",
]

__version__ = "0.1.0"
