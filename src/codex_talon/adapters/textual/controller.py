"""Composer controller bridging a Talon session and a Textual host."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from codex_talon.protocol import (
    EditorState,
    ResponseStatus,
    SetBuffer,
    TalonHooks,
    TalonPaths,
    TalonResponse,
    byte_length,
)
from codex_talon.session import SessionContext, TalonSession

Location = Tuple[int, int]  # (row, column) in characters


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def location_to_offset(text: str, location: Location) -> int:
    """Byte offset for a (row, column) location, clamped to the text."""

    lines = text.split("\n")
    row = max(0, min(location[0], len(lines) - 1))
    col = max(0, min(location[1], len(lines[row])))
    prefix = "\n".join(lines[:row] + [lines[row][:col]])
    return byte_length(prefix)


def offset_to_location(text: str, offset: int) -> Location:
    # A byte offset inside a multi-byte character lands before that character.
    prefix = text.encode("utf-8")[: max(0, offset)].decode("utf-8", errors="ignore")
    row = prefix.count("\n")
    col = len(prefix) - (prefix.rfind("\n") + 1)
    return (row, col)


@dataclass(slots=True)
class ComposerUIHooks:
    """Callbacks the controller uses to update the host widgets."""

    update_composer: Callable[[str, Location], None]
    update_status: Callable[[str], None] = _noop
    notify: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TalonComposerController:
    """Owns the composer snapshot and submitted-message history.

    Notifications are forwarded as they are interpreted. History intents are
    queued while a request is applied and replayed, in order, once the
    response has been published.
    """

    def __init__(
        self,
        paths: TalonPaths,
        hooks: ComposerUIHooks,
        *,
        context: Optional[SessionContext] = None,
        state: Optional[EditorState] = None,
    ) -> None:
        self.ui = hooks
        self.state = (state or EditorState()).clamped()
        self.history: List[str] = []
        self._history_index: Optional[int] = None
        self._draft = ""
        self._pending: List[Tuple[str, int]] = []
        self.session = TalonSession(
            paths,
            context=context,
            hooks=TalonHooks(
                notify=self._forward_notify,
                edit_previous_message=lambda steps: self._queue("edit_previous", steps),
                history_previous=lambda: self._queue("previous"),
                history_next=lambda: self._queue("next"),
            ),
        )
        self._refresh_composer()

    def poll(self) -> TalonResponse:
        """Run one protocol tick against the current composer state."""

        self._pending.clear()
        response = self.session.process(self.state)
        self.state = response.state
        if SetBuffer.TAG in response.applied:
            # Dictated text replaces whatever history entry was being browsed.
            self._history_index = None
            self._draft = ""
        for intent, steps in self._pending:
            if intent == "previous":
                self.history_previous()
            elif intent == "next":
                self.history_next()
            else:
                self.edit_previous_message(steps)
        self._pending.clear()

        if response.applied or response.status is ResponseStatus.ERROR:
            self.ui.update_status(f"talon: {response.status.value}")
            self._log(
                "talon ->", status=response.status.value, applied=response.applied
            )
            self._refresh_composer()
        return response

    def sync_from_host(self, text: str, location: Location) -> None:
        """Record an edit made directly in the host widget."""

        self.state = replace(
            self.state, buffer=text, cursor=location_to_offset(text, location)
        )

    def cursor_location(self) -> Location:
        return offset_to_location(self.state.buffer, self.state.cursor)

    def submit(self) -> str:
        """Move the composer text into history and clear the composer."""

        text = self.state.buffer
        if text.strip():
            self.history.append(text)
        self._history_index = None
        self._draft = ""
        self._set_buffer("")
        return text

    def set_task(self, summary: Optional[str]) -> None:
        """Mark a task as running (``summary`` given) or finished (``None``)."""

        self.session.context.set_status_summary(summary)
        self.state = replace(
            self.state, is_task_running=summary is not None, task_summary=summary
        )
        self.ui.update_status(summary or "idle")

    def history_previous(self) -> None:
        if not self.history:
            return
        if self._history_index is None:
            self._draft = self.state.buffer
            index = len(self.history) - 1
        else:
            index = max(0, self._history_index - 1)
        self._history_index = index
        self._set_buffer(self.history[index])

    def history_next(self) -> None:
        if self._history_index is None:
            return
        index = self._history_index + 1
        if index >= len(self.history):
            self._history_index = None
            self._set_buffer(self._draft)
            return
        self._history_index = index
        self._set_buffer(self.history[index])

    def edit_previous_message(self, steps_back: int) -> None:
        if not self.history:
            return
        if self._history_index is None:
            self._draft = self.state.buffer
        index = max(0, len(self.history) - 1 - steps_back)
        self._history_index = index
        self._set_buffer(self.history[index])

    def _set_buffer(self, text: str) -> None:
        self.state = replace(self.state, buffer=text, cursor=byte_length(text))
        self._refresh_composer()

    def _forward_notify(self, message: str) -> None:
        self.ui.notify(message)

    def _queue(self, intent: str, steps: int = 0) -> None:
        self._pending.append((intent, steps))

    def _refresh_composer(self) -> None:
        self.ui.update_composer(self.state.buffer, self.cursor_location())

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix]
        parts.extend(f"{key}={value!r}" for key, value in fields.items())
        parts.append(f"cursor={self.state.cursor}")
        self.ui.log(" ".join(parts))


__all__ = [
    "ComposerUIHooks",
    "TalonComposerController",
    "location_to_offset",
    "offset_to_location",
]
