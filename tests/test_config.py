from pathlib import Path

from codex_talon.config import DEFAULT_POLL_INTERVAL_MS, TalonConfig


def test_defaults_without_environment() -> None:
    config = TalonConfig.from_env({})

    assert config.home is None
    assert config.poll_interval_ms == DEFAULT_POLL_INTERVAL_MS
    assert config.session_id is None


def test_values_from_environment(tmp_path: Path) -> None:
    config = TalonConfig.from_env(
        {
            "CODEX_TALON_HOME": str(tmp_path),
            "CODEX_TALON_POLL_INTERVAL_MS": "100",
            "CODEX_TALON_SESSION_ID": " session-7 ",
        }
    )

    assert config.home == tmp_path
    assert config.poll_interval_ms == 100
    assert config.poll_interval == 0.1
    assert config.session_id == "session-7"


def test_invalid_poll_interval_falls_back() -> None:
    for value in ("soon", "0", "-20"):
        config = TalonConfig.from_env({"CODEX_TALON_POLL_INTERVAL_MS": value})
        assert config.poll_interval_ms == DEFAULT_POLL_INTERVAL_MS
