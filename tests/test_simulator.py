import json
from pathlib import Path

import pytest

from codex_talon.cli import sim
from codex_talon.protocol import (
    EditorState,
    ResponseStatus,
    SetBuffer,
    SetCursor,
    TalonRequest,
    resolve_paths,
    simulate,
    simulate_document,
    write_request,
)
from codex_talon.session import TalonSession


def test_simulate_without_request_reports_no_request() -> None:
    response = simulate(None)

    assert response.status is ResponseStatus.NO_REQUEST
    assert response.applied == ()
    assert response.error is None
    assert response.state == EditorState()


def test_simulate_empty_request_keeps_state() -> None:
    state = EditorState(buffer="abc", cursor=1)

    response = simulate(TalonRequest(), state)

    assert response.status is ResponseStatus.NO_REQUEST
    assert response.state == state


def test_simulate_applies_commands() -> None:
    request = TalonRequest(commands=(SetBuffer("ab"), SetCursor(0)))

    response = simulate(request, timestamp_ms=10)

    assert response.status is ResponseStatus.OK
    assert response.state.buffer == "ab"
    assert response.state.cursor == 0
    assert response.applied == ("set_buffer", "set_cursor")
    assert response.timestamp_ms == 10


def test_unknown_tag_reports_error_with_unchanged_state() -> None:
    state = EditorState(buffer="before", cursor=2)
    raw = json.dumps({"commands": [{"type": "set_buffer", "text": "x"}, {"type": "?"}]})

    response = simulate_document(raw, state)

    assert response.status is ResponseStatus.ERROR
    assert response.error is not None
    assert response.applied == ()
    assert response.state == state


def test_simulator_matches_live_session(tmp_path: Path) -> None:
    paths = resolve_paths(tmp_path)
    state = EditorState(buffer="héllo wörld", cursor=3, session_id="abc")
    request = TalonRequest(
        commands=(SetCursor(500), SetBuffer("dictated text", cursor=4), SetCursor(2))
    )
    write_request(paths, request)

    live = TalonSession(paths).process(state).to_dict()
    offline = simulate(request, state).to_dict()

    live.pop("timestamp_ms")
    offline.pop("timestamp_ms")
    assert live == offline


def write_json(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_sim_cli_prints_response(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    state_path = write_json(tmp_path / "state.json", {"buffer": "abc", "cursor": 99})
    request_path = write_json(
        tmp_path / "request.json",
        {
            "commands": [
                {"type": "set_cursor", "cursor": 1},
                {"type": "notify", "message": "hi"},
            ]
        },
    )

    exit_code = sim.main(["--state", str(state_path), "--request", str(request_path)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "ok"
    assert payload["state"]["cursor"] == 1
    assert payload["applied"] == ["set_cursor", "notify"]
    assert payload["version"] == 1


def test_sim_cli_writes_output_file(tmp_path: Path) -> None:
    request_path = write_json(tmp_path / "request.json", {"commands": []})
    output_path = tmp_path / "response.json"

    exit_code = sim.main(["--request", str(request_path), "--output", str(output_path)])

    assert exit_code == 0
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["status"] == "no_request"
    assert payload["state"]["buffer"] == ""


def test_sim_cli_reports_parse_errors_in_response(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    request_path = write_json(
        tmp_path / "request.json", {"commands": [{"type": "nope"}]}
    )

    exit_code = sim.main(["--request", str(request_path)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "error"
    assert "nope" in payload["error"]


def test_sim_cli_fails_on_missing_request(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = sim.main(["--request", str(tmp_path / "missing.json")])

    assert exit_code == 1
    assert "failed to read request file" in capsys.readouterr().err


def test_surrogate_text_reports_error() -> None:
    state = EditorState(buffer="before", cursor=2)
    raw = json.dumps({"commands": [{"type": "set_buffer", "text": "\ud800"}]})

    response = simulate_document(raw, state)

    assert response.status is ResponseStatus.ERROR
    assert response.state == state
