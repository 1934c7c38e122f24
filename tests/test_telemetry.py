import pytest

from codex_talon.runtime import telemetry


def test_loggers_are_cached_until_reconfigured() -> None:
    first = telemetry.get_logger("codex_talon.test")

    assert telemetry.get_logger("codex_talon.test") is first

    telemetry.configure()

    assert telemetry.get_logger("codex_talon.test") is not first


def test_record_event_accepts_any_level_name() -> None:
    telemetry.record_event("talon.test", level="DEBUG", data={"applied": ["a"]})
    telemetry.record_event("talon.test", level="warning")


def test_span_collects_metadata_and_reraises() -> None:
    with telemetry.span("talon::test", component="tests") as handle:
        handle.add_metadata("cursor", 3)

    assert handle.metadata == {"cursor": "3"}

    with pytest.raises(ValueError, match="boom"):
        with telemetry.span("talon::test", metadata={"commands": 1}):
            raise ValueError("boom")
