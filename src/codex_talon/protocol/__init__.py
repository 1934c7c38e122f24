"""Talon command protocol: request parsing, interpretation, and responses."""

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
    TalonRequest,
    parse_command,
    parse_request,
)
from .errors import (
    RequestParseError,
    ResponseFormatError,
    StateFormatError,
    TalonError,
    TalonIOError,
    TalonPathError,
)
from .files import (
    load_state_file,
    read_request,
    read_response_text,
    remove_request,
    write_request,
    write_response,
)
from .interpreter import CommandInterpreter, InterpretResult, TalonHooks, apply_commands
from .paths import TalonPaths, resolve_paths
from .pipeline import run_failure, run_request
from .response import (
    PROTOCOL_VERSION,
    ResponseStatus,
    TalonResponse,
    build_response,
    decode_response,
    derive_status,
    encode_response,
    now_timestamp_ms,
)
from .simulator import simulate, simulate_document
from .state import EditorState, byte_length, clamp_cursor

__all__ = [
    "COMMAND_TYPES",
    "Command",
    "CommandInterpreter",
    "EditPreviousMessage",
    "EditorState",
    "GetState",
    "HistoryNext",
    "HistoryPrevious",
    "InterpretResult",
    "Notify",
    "PROTOCOL_VERSION",
    "RequestParseError",
    "ResponseFormatError",
    "ResponseStatus",
    "SetBuffer",
    "SetCursor",
    "StateFormatError",
    "TalonError",
    "TalonHooks",
    "TalonIOError",
    "TalonPathError",
    "TalonPaths",
    "TalonRequest",
    "TalonResponse",
    "apply_commands",
    "build_response",
    "byte_length",
    "clamp_cursor",
    "decode_response",
    "derive_status",
    "encode_response",
    "load_state_file",
    "now_timestamp_ms",
    "parse_command",
    "parse_request",
    "read_request",
    "read_response_text",
    "remove_request",
    "resolve_paths",
    "run_failure",
    "run_request",
    "simulate",
    "simulate_document",
    "write_request",
    "write_response",
]
