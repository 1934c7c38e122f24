"""Offline harness that runs requests without a live editor process."""

from __future__ import annotations

from typing import Optional

from .commands import TalonRequest, parse_request
from .errors import RequestParseError
from .pipeline import run_failure, run_request
from .response import TalonResponse
from .state import EditorState


def simulate(
    request: Optional[TalonRequest],
    state: Optional[EditorState] = None,
    *,
    timestamp_ms: Optional[int] = None,
) -> TalonResponse:
    """Apply ``request`` to ``state`` (an empty editor by default).

    No hooks are attached, so notify and history commands are only labelled.
    """

    return run_request(state or EditorState(), request, timestamp_ms=timestamp_ms)


def simulate_document(
    raw: str,
    state: Optional[EditorState] = None,
    *,
    source: Optional[str] = None,
    timestamp_ms: Optional[int] = None,
) -> TalonResponse:
    """Parse request text and simulate it; parse failures become error responses."""

    initial = state or EditorState()
    try:
        request = parse_request(raw, source=source)
    except RequestParseError as exc:
        return run_failure(initial, str(exc), timestamp_ms=timestamp_ms)
    return simulate(request, initial, timestamp_ms=timestamp_ms)


__all__ = ["simulate", "simulate_document"]
