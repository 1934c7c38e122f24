"""Textual host for the Talon-driven composer."""

from .controller import (
    ComposerUIHooks,
    TalonComposerController,
    location_to_offset,
    offset_to_location,
)

__all__ = [
    "ComposerUIHooks",
    "TalonComposerController",
    "location_to_offset",
    "offset_to_location",
]
