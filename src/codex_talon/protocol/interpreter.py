"""State machine that applies a Talon command batch to an editor snapshot."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, Optional, Tuple

from codex_talon.runtime import telemetry

from .commands import (
    COMMAND_TYPES,
    Command,
    EditPreviousMessage,
    GetState,
    HistoryNext,
    HistoryPrevious,
    Notify,
    SetBuffer,
    SetCursor,
)
from .state import EditorState, byte_length, clamp_cursor


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TalonHooks:
    """Side channel for commands whose effect lives in the presentation layer."""

    notify: Callable[[str], None] = _noop
    edit_previous_message: Callable[[int], None] = _noop
    history_previous: Callable[[], None] = _noop
    history_next: Callable[[], None] = _noop


@dataclass(slots=True)
class InterpretResult:
    state: EditorState
    applied: Tuple[str, ...]


Handler = Callable[["CommandInterpreter", EditorState, Command], EditorState]


def _set_buffer(
    _interp: "CommandInterpreter", state: EditorState, command: SetBuffer
) -> EditorState:
    text = command.text
    desired = byte_length(text) if command.cursor is None else command.cursor
    return replace(state, buffer=text, cursor=clamp_cursor(desired, text))


def _set_cursor(
    _interp: "CommandInterpreter", state: EditorState, command: SetCursor
) -> EditorState:
    return replace(state, cursor=clamp_cursor(command.cursor, state.buffer))


def _get_state(
    _interp: "CommandInterpreter", state: EditorState, _command: GetState
) -> EditorState:
    return state


def _notify(
    interp: "CommandInterpreter", state: EditorState, command: Notify
) -> EditorState:
    interp.hooks.notify(command.message)
    return state


def _edit_previous(
    interp: "CommandInterpreter", state: EditorState, command: EditPreviousMessage
) -> EditorState:
    interp.hooks.edit_previous_message(command.steps_back)
    return state


def _history_previous(
    interp: "CommandInterpreter", state: EditorState, _command: HistoryPrevious
) -> EditorState:
    interp.hooks.history_previous()
    return state


def _history_next(
    interp: "CommandInterpreter", state: EditorState, _command: HistoryNext
) -> EditorState:
    interp.hooks.history_next()
    return state


_HANDLERS: Dict[type, Handler] = {
    SetBuffer: _set_buffer,
    SetCursor: _set_cursor,
    GetState: _get_state,
    Notify: _notify,
    EditPreviousMessage: _edit_previous,
    HistoryPrevious: _history_previous,
    HistoryNext: _history_next,
}

_unhandled = sorted(tag for tag, cls in COMMAND_TYPES.items() if cls not in _HANDLERS)
if _unhandled:
    raise ImportError(f"Talon commands without an interpreter handler: {_unhandled}")


class CommandInterpreter:
    """Applies commands strictly in order, labelling each one it processed."""

    def __init__(self, hooks: Optional[TalonHooks] = None) -> None:
        self.hooks = hooks or TalonHooks()

    def apply(self, state: EditorState, commands: Iterable[Command]) -> InterpretResult:
        batch = tuple(commands)
        applied: list[str] = []
        current = state.clamped()
        with telemetry.span(
            "talon::apply",
            component="interpreter",
            metadata={"commands": len(batch)},
        ) as handle:
            for command in batch:
                handler = _HANDLERS[type(command)]
                current = handler(self, current, command).clamped()
                applied.append(command.TAG)
            handle.add_metadata("cursor", current.cursor)
        return InterpretResult(state=current, applied=tuple(applied))


def apply_commands(
    state: EditorState,
    commands: Iterable[Command],
    *,
    hooks: Optional[TalonHooks] = None,
) -> InterpretResult:
    return CommandInterpreter(hooks).apply(state, commands)


__all__ = ["CommandInterpreter", "InterpretResult", "TalonHooks", "apply_commands"]
