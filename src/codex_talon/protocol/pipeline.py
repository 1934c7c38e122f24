"""Request handling shared by the live session and the simulator."""

from __future__ import annotations

from typing import Optional

from codex_talon.runtime import telemetry

from .commands import TalonRequest
from .interpreter import CommandInterpreter, TalonHooks
from .response import TalonResponse, build_response
from .state import EditorState


def run_request(
    state: EditorState,
    request: Optional[TalonRequest],
    *,
    hooks: Optional[TalonHooks] = None,
    timestamp_ms: Optional[int] = None,
) -> TalonResponse:
    """Apply ``request`` to ``state`` and describe the outcome.

    ``request=None`` (nothing pending) and an empty command list both
    report ``no_request`` with the state left as it was.
    """

    if request is None:
        return build_response(state.clamped(), (), timestamp_ms=timestamp_ms)
    result = CommandInterpreter(hooks).apply(state, request.commands)
    response = build_response(result.state, result.applied, timestamp_ms=timestamp_ms)
    telemetry.record_event(
        "talon.request.applied",
        data={"status": response.status.value, "applied": ",".join(result.applied)},
    )
    return response


def run_failure(
    state: EditorState,
    error: str,
    *,
    timestamp_ms: Optional[int] = None,
) -> TalonResponse:
    """Report a failed request; the state is returned untouched."""

    telemetry.record_event(
        "talon.request.error", level="warning", data={"error": error}
    )
    return build_response(state.clamped(), (), error, timestamp_ms=timestamp_ms)


__all__ = ["run_failure", "run_request"]
