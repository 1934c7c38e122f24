import pytest

from codex_talon.protocol import EditorState, StateFormatError, byte_length


def test_from_dict_clamps_out_of_range_cursor() -> None:
    state = EditorState.from_dict({"buffer": "abc", "cursor": 99})

    assert state.cursor == 3


def test_from_dict_defaults_missing_fields() -> None:
    state = EditorState.from_dict({})

    assert state == EditorState()
    assert state.buffer == ""
    assert state.cursor == 0
    assert state.is_task_running is False
    assert state.task_summary is None


def test_from_dict_keeps_passthrough_metadata() -> None:
    state = EditorState.from_dict(
        {
            "buffer": "hi",
            "cursor": 1,
            "is_task_running": True,
            "task_summary": "compiling",
            "session_id": "abc-123",
            "cwd": "/tmp/project",
        }
    )

    assert state.is_task_running is True
    assert state.task_summary == "compiling"
    assert state.session_id == "abc-123"
    assert state.cwd == "/tmp/project"


@pytest.mark.parametrize(
    "payload",
    [
        {"buffer": 12},
        {"cursor": "3"},
        {"cursor": -1},
        {"cursor": True},
        {"is_task_running": "yes"},
        {"task_summary": 5},
        {"buffer": "\ud800"},
        {"cwd": "/tmp/\udc80"},
    ],
)
def test_from_dict_rejects_wrong_types(payload) -> None:
    with pytest.raises(StateFormatError):
        EditorState.from_dict(payload)


def test_cursor_is_measured_in_utf8_bytes() -> None:
    state = EditorState(buffer="héllo", cursor=100).clamped()

    assert byte_length("héllo") == 6
    assert state.cursor == 6
    assert state.buffer_length == 6


def test_to_dict_emits_null_metadata() -> None:
    payload = EditorState(buffer="x", cursor=1).to_dict()

    assert payload == {
        "buffer": "x",
        "cursor": 1,
        "is_task_running": False,
        "task_summary": None,
        "session_id": None,
        "cwd": None,
    }
