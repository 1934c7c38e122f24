"""``talon-send``: stage single-command requests and inspect the latest response."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Callable, Dict, Optional, Sequence

from codex_talon.config import TalonConfig
from codex_talon.protocol import (
    Command,
    EditPreviousMessage,
    GetState,
    HistoryNext,
    HistoryPrevious,
    Notify,
    SetBuffer,
    SetCursor,
    TalonError,
    TalonPaths,
    TalonRequest,
    read_response_text,
    remove_request,
    resolve_paths,
    write_request,
)


def _non_negative(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer '{value}'") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be non-negative")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="talon-send",
        description="Send commands to the Codex Talon command server",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    set_buffer = sub.add_parser(
        "set-buffer", help="Replace the input buffer (optional cursor)."
    )
    set_buffer.add_argument("-t", "--text", required=True, help="Buffer text.")
    set_buffer.add_argument(
        "-c",
        "--cursor",
        type=_non_negative,
        default=None,
        help="Optional cursor offset within the new buffer.",
    )

    set_cursor = sub.add_parser(
        "set-cursor", help="Move cursor to an absolute byte offset within the buffer."
    )
    set_cursor.add_argument("cursor", type=_non_negative)

    sub.add_parser("clear", help="Clear any pending request file.")
    sub.add_parser("state", help="Stage a request for the editor to emit its state.")

    show_state = sub.add_parser(
        "show-state", help="Print the most recent response/state file."
    )
    show_state.add_argument(
        "--raw", action="store_true", help="Emit raw JSON without pretty formatting."
    )

    notify = sub.add_parser("notify", help="Stage a flash notification.")
    notify.add_argument("message", help="Text to display.")

    sub.add_parser("history-previous", help="Navigate to the previous history entry.")
    sub.add_parser("history-next", help="Navigate to the next history entry.")

    edit_previous = sub.add_parser(
        "edit-previous",
        help="Prefill the composer by stepping back N entries in history.",
    )
    edit_previous.add_argument(
        "steps_back",
        nargs="?",
        type=_non_negative,
        default=0,
        help="Number of entries to step back from the latest.",
    )
    return parser


def _stage(paths: TalonPaths, command: Command, verb: str) -> str:
    write_request(paths, TalonRequest(commands=(command,)))
    return f"{verb} via {paths.request_path}"


def _set_buffer(paths: TalonPaths, args: argparse.Namespace) -> str:
    write_request(paths, TalonRequest(commands=(SetBuffer(args.text, args.cursor),)))
    return f"wrote request to {paths.request_path}"


def _set_cursor(paths: TalonPaths, args: argparse.Namespace) -> str:
    write_request(paths, TalonRequest(commands=(SetCursor(args.cursor),)))
    return f"wrote request to {paths.request_path}"


def _clear(paths: TalonPaths, args: argparse.Namespace) -> str:
    del args
    remove_request(paths)
    return f"cleared request at {paths.request_path}"


def _show_state(paths: TalonPaths, args: argparse.Namespace) -> str:
    contents = read_response_text(paths)
    if args.raw:
        return contents
    try:
        value = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise TalonError(
            f"failed to parse JSON from {paths.response_path}: {exc}"
        ) from exc
    return json.dumps(value, indent=2, ensure_ascii=False)


_HANDLERS: Dict[str, Callable[[TalonPaths, argparse.Namespace], str]] = {
    "set-buffer": _set_buffer,
    "set-cursor": _set_cursor,
    "clear": _clear,
    "state": lambda paths, _args: _stage(paths, GetState(), "requested state"),
    "show-state": _show_state,
    "notify": lambda paths, args: _stage(
        paths, Notify(args.message), "requested notification"
    ),
    "history-previous": lambda paths, _args: _stage(
        paths, HistoryPrevious(), "requested history_previous"
    ),
    "history-next": lambda paths, _args: _stage(
        paths, HistoryNext(), "requested history_next"
    ),
    "edit-previous": lambda paths, args: _stage(
        paths,
        EditPreviousMessage(args.steps_back),
        f"requested edit_previous_message({args.steps_back})",
    ),
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = TalonConfig.from_env()
    try:
        paths = resolve_paths(config.home)
        message = _HANDLERS[args.command](paths, args)
    except TalonError as exc:
        print(f"talon-send: {exc}", file=sys.stderr)
        return 1
    print(message)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry point
    raise SystemExit(main())
