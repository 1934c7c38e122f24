"""Talon command variants and request document parsing."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union

from .errors import RequestParseError


@dataclass(frozen=True, slots=True)
class SetBuffer:
    """Replace the whole composer buffer, optionally placing the cursor."""

    TAG: ClassVar[str] = "set_buffer"

    text: str
    cursor: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.TAG, "text": self.text}
        if self.cursor is not None:
            payload["cursor"] = self.cursor
        return payload


@dataclass(frozen=True, slots=True)
class SetCursor:
    """Move the cursor to an absolute byte offset."""

    TAG: ClassVar[str] = "set_cursor"

    cursor: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TAG, "cursor": self.cursor}


@dataclass(frozen=True, slots=True)
class GetState:
    """Ask the editor to report its current snapshot."""

    TAG: ClassVar[str] = "get_state"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TAG}


@dataclass(frozen=True, slots=True)
class Notify:
    """Flash a message in the editor without touching the buffer."""

    TAG: ClassVar[str] = "notify"

    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TAG, "message": self.message}


@dataclass(frozen=True, slots=True)
class EditPreviousMessage:
    """Prefill the composer from history, ``steps_back`` entries before the latest."""

    TAG: ClassVar[str] = "edit_previous_message"

    steps_back: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TAG, "steps_back": self.steps_back}


@dataclass(frozen=True, slots=True)
class HistoryPrevious:
    TAG: ClassVar[str] = "history_previous"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TAG}


@dataclass(frozen=True, slots=True)
class HistoryNext:
    TAG: ClassVar[str] = "history_next"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TAG}


Command = Union[
    SetBuffer,
    SetCursor,
    GetState,
    Notify,
    EditPreviousMessage,
    HistoryPrevious,
    HistoryNext,
]


@dataclass(frozen=True, slots=True)
class TalonRequest:
    """Ordered batch of commands; list order is execution order."""

    commands: Tuple[Command, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"commands": [command.to_dict() for command in self.commands]}


def _require_str(payload: Mapping[str, Any], tag: str, key: str) -> str:
    if key not in payload:
        raise RequestParseError(f"missing field '{key}' for command '{tag}'")
    value = payload[key]
    if not isinstance(value, str):
        raise RequestParseError(f"field '{key}' of command '{tag}' must be a string")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise RequestParseError(
            f"field '{key}' of command '{tag}' is not valid Unicode"
        ) from exc
    return value


def _optional_uint(payload: Mapping[str, Any], tag: str, key: str) -> Optional[int]:
    if payload.get(key) is None:
        return None
    return _uint(payload, tag, key)


def _uint(payload: Mapping[str, Any], tag: str, key: str) -> int:
    value = payload.get(key)
    if value is None:
        raise RequestParseError(f"missing field '{key}' for command '{tag}'")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise RequestParseError(
            f"field '{key}' of command '{tag}' must be a non-negative integer"
        )
    return value


def _parse_set_buffer(payload: Mapping[str, Any]) -> SetBuffer:
    return SetBuffer(
        text=_require_str(payload, SetBuffer.TAG, "text"),
        cursor=_optional_uint(payload, SetBuffer.TAG, "cursor"),
    )


def _parse_set_cursor(payload: Mapping[str, Any]) -> SetCursor:
    return SetCursor(cursor=_uint(payload, SetCursor.TAG, "cursor"))


def _parse_notify(payload: Mapping[str, Any]) -> Notify:
    return Notify(message=_require_str(payload, Notify.TAG, "message"))


def _parse_edit_previous(payload: Mapping[str, Any]) -> EditPreviousMessage:
    steps_back = _optional_uint(payload, EditPreviousMessage.TAG, "steps_back")
    return EditPreviousMessage(steps_back=steps_back or 0)


_COMMAND_PARSERS: Dict[str, Callable[[Mapping[str, Any]], Command]] = {
    SetBuffer.TAG: _parse_set_buffer,
    SetCursor.TAG: _parse_set_cursor,
    GetState.TAG: lambda _payload: GetState(),
    Notify.TAG: _parse_notify,
    EditPreviousMessage.TAG: _parse_edit_previous,
    HistoryPrevious.TAG: lambda _payload: HistoryPrevious(),
    HistoryNext.TAG: lambda _payload: HistoryNext(),
}

COMMAND_TYPES: Mapping[str, type] = {
    cls.TAG: cls
    for cls in (
        SetBuffer,
        SetCursor,
        GetState,
        Notify,
        EditPreviousMessage,
        HistoryPrevious,
        HistoryNext,
    )
}


def parse_command(payload: Any) -> Command:
    """Build a command from one decoded ``{"type": ..., ...}`` object."""

    if not isinstance(payload, Mapping):
        raise RequestParseError("each command must be a JSON object")
    tag = payload.get("type")
    if not isinstance(tag, str):
        raise RequestParseError("command is missing its 'type' tag")
    parser = _COMMAND_PARSERS.get(tag)
    if parser is None:
        raise RequestParseError(f"unknown command type '{tag}'")
    return parser(payload)


def request_from_dict(data: Any) -> TalonRequest:
    if not isinstance(data, Mapping):
        raise RequestParseError("request must be a JSON object")
    raw_commands = data.get("commands")
    if raw_commands is None:
        return TalonRequest()
    if not isinstance(raw_commands, list):
        raise RequestParseError("'commands' must be a list")
    return TalonRequest(commands=tuple(parse_command(item) for item in raw_commands))


def parse_request(raw: str, *, source: Optional[str] = None) -> Optional[TalonRequest]:
    """Parse request text; blank text means there is no request.

    Malformed JSON and unknown command tags raise ``RequestParseError``
    tagged with ``source`` (usually the request file path).
    """

    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RequestParseError(str(exc), source=source) from exc
    except RecursionError as exc:
        raise RequestParseError("request is nested too deeply", source=source) from exc
    try:
        return request_from_dict(data)
    except RequestParseError as exc:
        if source is None:
            raise
        raise RequestParseError(str(exc), source=source) from exc


__all__ = [
    "COMMAND_TYPES",
    "Command",
    "EditPreviousMessage",
    "GetState",
    "HistoryNext",
    "HistoryPrevious",
    "Notify",
    "SetBuffer",
    "SetCursor",
    "TalonRequest",
    "parse_command",
    "parse_request",
    "request_from_dict",
]
