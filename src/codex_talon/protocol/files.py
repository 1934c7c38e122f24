"""Reading and writing the request/response files on disk."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from codex_talon.runtime import telemetry

from .commands import TalonRequest, parse_request
from .errors import RequestParseError, StateFormatError, TalonIOError
from .paths import TalonPaths
from .response import TalonResponse, encode_response
from .state import EditorState


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise RequestParseError("request is not valid UTF-8", source=str(path)) from exc
    except OSError as exc:
        raise TalonIOError(f"failed to read {path}: {exc}", path=path) from exc


def _replace_file(path: Path, payload: str) -> None:
    """Write ``payload`` to a sibling temp file and swap it into place."""

    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        raise TalonIOError(f"failed to write {path}: {exc}", path=path) from exc


def read_request(paths: TalonPaths) -> Optional[TalonRequest]:
    """Load the pending request, or ``None`` when the file is missing or blank."""

    raw = _read_text(paths.request_path)
    if raw is None:
        return None
    request = parse_request(raw, source=str(paths.request_path))
    if request is not None:
        telemetry.record_event(
            "talon.request.read",
            level="debug",
            data={"commands": len(request.commands)},
        )
    return request


def remove_request(paths: TalonPaths) -> None:
    try:
        paths.request_path.unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        raise TalonIOError(
            f"failed to remove {paths.request_path}: {exc}", path=paths.request_path
        ) from exc


def write_request(paths: TalonPaths, request: TalonRequest) -> None:
    _replace_file(paths.request_path, json.dumps(request.to_dict(), indent=2))


def write_response(paths: TalonPaths, response: TalonResponse) -> None:
    """Overwrite the response file with ``response``; never appends."""

    _replace_file(paths.response_path, encode_response(response))
    telemetry.record_event(
        "talon.response.written",
        level="debug",
        data={"status": response.status.value, "applied": len(response.applied)},
    )


def read_response_text(paths: TalonPaths) -> str:
    """Raw response document; a missing file is an error here."""

    path = paths.response_path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TalonIOError(f"failed to read {path}: {exc}", path=path) from exc


def load_state_file(path: Path) -> EditorState:
    """Read an initial editor state document; the cursor is clamped on load."""

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TalonIOError(
            f"failed to read state file {path}: {exc}", path=path
        ) from exc
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise StateFormatError(
            f"failed to parse state JSON from {path}: {exc}"
        ) from exc
    return EditorState.from_dict(data)


__all__ = [
    "load_state_file",
    "read_request",
    "read_response_text",
    "remove_request",
    "write_request",
    "write_response",
]
