"""Live consumer side of the Talon protocol, driven once per host tick."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional

from codex_talon.protocol import (
    EditorState,
    RequestParseError,
    TalonHooks,
    TalonIOError,
    TalonPaths,
    TalonResponse,
    read_request,
    remove_request,
    run_failure,
    run_request,
    write_response,
)
from codex_talon.runtime import telemetry


class SessionContext:
    """Owned session data the display layer and the protocol both read.

    Holds the human-readable status summary for the task currently running
    in the editor.
    """

    def __init__(self, status_summary: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._status_summary = status_summary

    def set_status_summary(self, summary: Optional[str]) -> None:
        with self._lock:
            self._status_summary = summary

    def status_summary(self) -> Optional[str]:
        with self._lock:
            return self._status_summary


class TalonSession:
    """Reads a pending request, applies it, and publishes the response."""

    def __init__(
        self,
        paths: TalonPaths,
        *,
        context: Optional[SessionContext] = None,
        hooks: Optional[TalonHooks] = None,
    ) -> None:
        self.paths = paths
        self.context = context or SessionContext()
        self.hooks = hooks
        self.logger = telemetry.get_logger("codex_talon.session")

    def snapshot(self, state: EditorState) -> EditorState:
        if state.task_summary is None:
            summary = self.context.status_summary()
            if summary is not None:
                state = replace(state, task_summary=summary)
        return state.clamped()

    def process(self, state: EditorState) -> TalonResponse:
        """Handle at most one pending request.

        With no request file nothing is written and a ``no_request``
        response is returned. A request that fails to parse or read is
        reported in the response file instead of raised. The request file is
        removed once handled.
        """

        current = self.snapshot(state)
        try:
            request = read_request(self.paths)
        except (RequestParseError, TalonIOError) as exc:
            response = run_failure(current, str(exc))
            self._publish(response)
            return response

        if request is None:
            return run_request(current, None)

        response = run_request(current, request, hooks=self.hooks)
        self._publish(response)
        return response

    def _publish(self, response: TalonResponse) -> None:
        write_response(self.paths, response)
        remove_request(self.paths)
        self.logger.debug(f"talon response {response.status.value}")


__all__ = ["SessionContext", "TalonSession"]
