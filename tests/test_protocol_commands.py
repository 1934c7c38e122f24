import json

import pytest

from codex_talon.protocol import (
    COMMAND_TYPES,
    EditPreviousMessage,
    GetState,
    HistoryNext,
    HistoryPrevious,
    Notify,
    RequestParseError,
    SetBuffer,
    SetCursor,
    TalonRequest,
    parse_request,
)


def make_document(*commands: dict) -> str:
    return json.dumps({"commands": list(commands)})


@pytest.mark.parametrize("raw", ["", "   ", "\n\t\n"])
def test_blank_request_means_no_request(raw: str) -> None:
    assert parse_request(raw) is None


def test_parse_request_preserves_command_order() -> None:
    request = parse_request(
        make_document(
            {"type": "set_buffer", "text": "ab"},
            {"type": "set_cursor", "cursor": 0},
            {"type": "get_state"},
            {"type": "notify", "message": "hello"},
            {"type": "edit_previous_message", "steps_back": 2},
            {"type": "history_previous"},
            {"type": "history_next"},
        )
    )

    assert request is not None
    assert request.commands == (
        SetBuffer(text="ab"),
        SetCursor(cursor=0),
        GetState(),
        Notify(message="hello"),
        EditPreviousMessage(steps_back=2),
        HistoryPrevious(),
        HistoryNext(),
    )


def test_optional_fields_use_defaults() -> None:
    request = parse_request(
        make_document(
            {"type": "set_buffer", "text": "hi"},
            {"type": "edit_previous_message"},
        )
    )

    assert request is not None
    set_buffer, edit_previous = request.commands
    assert isinstance(set_buffer, SetBuffer)
    assert set_buffer.cursor is None
    assert isinstance(edit_previous, EditPreviousMessage)
    assert edit_previous.steps_back == 0


def test_missing_commands_key_is_an_empty_request() -> None:
    assert parse_request("{}") == TalonRequest()


def test_unknown_fields_are_ignored() -> None:
    request = parse_request(
        make_document({"type": "set_cursor", "cursor": 4, "extra": "ignored"})
    )

    assert request is not None
    assert request.commands == (SetCursor(cursor=4),)


def test_unknown_command_tag_fails() -> None:
    with pytest.raises(RequestParseError, match="unknown command type 'explode'"):
        parse_request(make_document({"type": "explode"}))


@pytest.mark.parametrize(
    "document",
    [
        "{not json",
        "[]",
        '{"commands": {"type": "get_state"}}',
        make_document("get_state"),
        make_document({"kind": "get_state"}),
        make_document({"type": "set_buffer"}),
        make_document({"type": "set_buffer", "text": 3}),
        make_document({"type": "set_cursor"}),
        make_document({"type": "set_cursor", "cursor": True}),
        make_document({"type": "set_cursor", "cursor": -2}),
        make_document({"type": "set_cursor", "cursor": 1.5}),
        make_document({"type": "notify"}),
        make_document({"type": "edit_previous_message", "steps_back": "1"}),
    ],
)
def test_malformed_requests_fail(document: str) -> None:
    with pytest.raises(RequestParseError):
        parse_request(document)


def test_parse_error_names_its_source() -> None:
    with pytest.raises(RequestParseError) as excinfo:
        parse_request("{oops", source="/tmp/request.json")

    assert "/tmp/request.json" in str(excinfo.value)
    assert excinfo.value.source == "/tmp/request.json"


def test_request_document_survives_serialization() -> None:
    request = TalonRequest(
        commands=(SetBuffer("hey", cursor=1), Notify("ping"), EditPreviousMessage(3))
    )

    assert parse_request(json.dumps(request.to_dict())) == request


def test_set_buffer_without_cursor_omits_the_field() -> None:
    assert SetBuffer("hi").to_dict() == {"type": "set_buffer", "text": "hi"}


def test_command_types_cover_every_tag() -> None:
    assert set(COMMAND_TYPES) == {
        "set_buffer",
        "set_cursor",
        "get_state",
        "notify",
        "edit_previous_message",
        "history_previous",
        "history_next",
    }


@pytest.mark.parametrize(
    "command",
    [
        {"type": "set_buffer", "text": "ok \ud800"},
        {"type": "notify", "message": "\udfff"},
    ],
)
def test_lone_surrogates_fail_to_parse(command: dict) -> None:
    with pytest.raises(RequestParseError, match="not valid Unicode"):
        parse_request(make_document(command), source="request.json")


def test_deeply_nested_document_fails_to_parse() -> None:
    raw = "[" * 100000 + "]" * 100000

    with pytest.raises(RequestParseError, match="nested too deeply") as excinfo:
        parse_request(raw, source="request.json")

    assert excinfo.value.source == "request.json"
