"""``talon-sim``: run a request against a state file without a live editor."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from codex_talon.protocol import (
    EditorState,
    TalonError,
    TalonIOError,
    encode_response,
    load_state_file,
    simulate_document,
)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="talon-sim",
        description="Simulate the editor's Talon RPC mutations for testing.",
    )
    parser.add_argument(
        "--state",
        type=Path,
        default=None,
        help="Initial state JSON file (defaults to an empty buffer)",
    )
    parser.add_argument(
        "--request",
        type=Path,
        required=True,
        help="Request JSON file containing commands",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the response JSON here instead of stdout",
    )
    return parser.parse_args(argv)


def _read_request_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TalonIOError(
            f"failed to read request file {path}: {exc}", path=path
        ) from exc


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        state = load_state_file(args.state) if args.state else EditorState()
        raw = _read_request_text(args.request)
        response = simulate_document(raw, state, source=str(args.request))
        payload = encode_response(response)
        if args.output is None:
            print(payload)
        else:
            try:
                args.output.write_text(payload, encoding="utf-8")
            except OSError as exc:
                raise TalonIOError(
                    f"failed to write response to {args.output}: {exc}",
                    path=args.output,
                ) from exc
    except TalonError as exc:
        print(f"talon-sim: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry point
    raise SystemExit(main())
