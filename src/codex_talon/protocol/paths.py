"""Well-known locations of the Talon request/response files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import TalonPathError

TALON_DIR_NAME = ".codex-talon"
REQUEST_FILENAME = "request.json"
RESPONSE_FILENAME = "response.json"


@dataclass(frozen=True, slots=True)
class TalonPaths:
    base_dir: Path
    request_path: Path
    response_path: Path

    @classmethod
    def under(cls, base_dir: Path) -> "TalonPaths":
        """Build the path pair for ``base_dir`` without touching the filesystem."""

        return cls(
            base_dir=base_dir,
            request_path=base_dir / REQUEST_FILENAME,
            response_path=base_dir / RESPONSE_FILENAME,
        )


def resolve_paths(home: Optional[Path] = None) -> TalonPaths:
    """Return ``{home}/.codex-talon/{request,response}.json``, creating the directory.

    ``home`` defaults to the current user's home directory.
    """

    if home is None:
        try:
            home = Path.home()
        except RuntimeError as exc:
            raise TalonPathError(
                "unable to locate home directory for Talon RPC paths"
            ) from exc

    base_dir = Path(home) / TALON_DIR_NAME
    try:
        base_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise TalonPathError(f"failed to create {base_dir}: {exc}") from exc
    return TalonPaths.under(base_dir)


__all__ = [
    "REQUEST_FILENAME",
    "RESPONSE_FILENAME",
    "TALON_DIR_NAME",
    "TalonPaths",
    "resolve_paths",
]
