"""Environment-driven settings for the Talon tools and composer host."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "CODEX_TALON_"
DEFAULT_POLL_INTERVAL_MS = 250


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        parsed = int(value.strip())
    except ValueError:
        return fallback
    return parsed if parsed > 0 else fallback


def _env_str(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True, slots=True)
class TalonConfig:
    """Settings read from ``CODEX_TALON_*`` variables."""

    home: Optional[Path] = None
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    session_id: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TalonConfig":
        source = os.environ if env is None else env
        home = _env_str(source, "HOME")
        return cls(
            home=Path(home).expanduser() if home else None,
            poll_interval_ms=_env_int(
                source, "POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS
            ),
            session_id=_env_str(source, "SESSION_ID"),
        )

    @property
    def poll_interval(self) -> float:
        return self.poll_interval_ms / 1000.0


__all__ = ["DEFAULT_POLL_INTERVAL_MS", "TalonConfig"]
