"""Response document emitted after every processed Talon request."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Tuple

from .errors import ResponseFormatError
from .state import EditorState

PROTOCOL_VERSION = 1


class ResponseStatus(str, Enum):
    OK = "ok"
    NO_REQUEST = "no_request"
    ERROR = "error"


def now_timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


def derive_status(applied: Iterable[str], error: Optional[str]) -> ResponseStatus:
    """An error wins; otherwise an empty ``applied`` means nothing was requested."""

    if error is not None:
        return ResponseStatus.ERROR
    if not tuple(applied):
        return ResponseStatus.NO_REQUEST
    return ResponseStatus.OK


@dataclass(frozen=True, slots=True)
class TalonResponse:
    version: int
    status: ResponseStatus
    state: EditorState
    applied: Tuple[str, ...]
    error: Optional[str]
    timestamp_ms: int

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "version": self.version,
            "status": self.status.value,
            "state": self.state.to_dict(),
        }
        if self.applied:
            payload["applied"] = list(self.applied)
        if self.error is not None:
            payload["error"] = self.error
        payload["timestamp_ms"] = self.timestamp_ms
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TalonResponse":
        if not isinstance(data, Mapping):
            raise ResponseFormatError("response must be a JSON object")
        try:
            status = ResponseStatus(data.get("status"))
        except ValueError as exc:
            raise ResponseFormatError(
                f"unknown response status {data.get('status')!r}"
            ) from exc
        applied = data.get("applied") or []
        if not isinstance(applied, list) or not all(
            isinstance(label, str) for label in applied
        ):
            raise ResponseFormatError("'applied' must be a list of strings")
        error = data.get("error")
        if error is not None and not isinstance(error, str):
            raise ResponseFormatError("'error' must be a string")
        version = data.get("version", PROTOCOL_VERSION)
        timestamp_ms = data.get("timestamp_ms", 0)
        if not isinstance(version, int) or not isinstance(timestamp_ms, int):
            raise ResponseFormatError("'version' and 'timestamp_ms' must be integers")
        return cls(
            version=version,
            status=status,
            state=EditorState.from_dict(data.get("state") or {}),
            applied=tuple(applied),
            error=error,
            timestamp_ms=timestamp_ms,
        )


def build_response(
    state: EditorState,
    applied: Iterable[str],
    error: Optional[str] = None,
    *,
    timestamp_ms: Optional[int] = None,
) -> TalonResponse:
    labels = tuple(applied)
    return TalonResponse(
        version=PROTOCOL_VERSION,
        status=derive_status(labels, error),
        state=state,
        applied=labels,
        error=error,
        timestamp_ms=now_timestamp_ms() if timestamp_ms is None else timestamp_ms,
    )


def encode_response(response: TalonResponse) -> str:
    return json.dumps(response.to_dict(), indent=2, ensure_ascii=False)


def decode_response(raw: str) -> TalonResponse:
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise ResponseFormatError(f"invalid response JSON: {exc}") from exc
    return TalonResponse.from_dict(data)


__all__ = [
    "PROTOCOL_VERSION",
    "ResponseFormatError",
    "ResponseStatus",
    "TalonResponse",
    "build_response",
    "decode_response",
    "derive_status",
    "encode_response",
    "now_timestamp_ms",
]
