"""Editor snapshot shared between the composer and the Talon protocol."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from .errors import StateFormatError


def byte_length(text: str) -> int:
    """Length of ``text`` in UTF-8 bytes; cursors are byte offsets."""

    return len(text.encode("utf-8"))


def clamp_cursor(cursor: int, text: str) -> int:
    return max(0, min(cursor, byte_length(text)))


@dataclass(slots=True)
class EditorState:
    """Composer buffer, cursor, and pass-through session metadata.

    ``cursor`` is a UTF-8 byte offset into ``buffer``. Anything that builds a
    state from outside input goes through ``clamped`` so that
    ``0 <= cursor <= byte_length(buffer)`` holds.
    """

    buffer: str = ""
    cursor: int = 0
    is_task_running: bool = False
    task_summary: Optional[str] = None
    session_id: Optional[str] = None
    cwd: Optional[str] = None

    def clamped(self) -> "EditorState":
        return replace(self, cursor=clamp_cursor(self.cursor, self.buffer))

    @property
    def buffer_length(self) -> int:
        return byte_length(self.buffer)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditorState":
        """Load a state document, defaulting missing fields and clamping the cursor."""

        if not isinstance(data, Mapping):
            raise StateFormatError("editor state must be a JSON object")
        state = cls(
            buffer=_field(data, "buffer", str, ""),
            cursor=_cursor_field(data),
            is_task_running=_field(data, "is_task_running", bool, False),
            task_summary=_optional_str(data, "task_summary"),
            session_id=_optional_str(data, "session_id"),
            cwd=_optional_str(data, "cwd"),
        )
        return state.clamped()

    def to_dict(self) -> dict[str, Any]:
        return {
            "buffer": self.buffer,
            "cursor": self.cursor,
            "is_task_running": self.is_task_running,
            "task_summary": self.task_summary,
            "session_id": self.session_id,
            "cwd": self.cwd,
        }


def _field(data: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise StateFormatError(f"state field '{key}' must be {kind.__name__}")
    if isinstance(value, str):
        _check_unicode(key, value)
    return value


def _cursor_field(data: Mapping[str, Any]) -> int:
    value = data.get("cursor")
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise StateFormatError("state field 'cursor' must be a non-negative integer")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise StateFormatError(f"state field '{key}' must be a string or null")
    if value is not None:
        _check_unicode(key, value)
    return value


def _check_unicode(key: str, value: str) -> None:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise StateFormatError(f"state field '{key}' is not valid Unicode") from exc


__all__ = ["EditorState", "byte_length", "clamp_cursor"]
