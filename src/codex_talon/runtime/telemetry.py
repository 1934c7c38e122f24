"""Telemetry for the Talon bridge, backed by telelog.

Everything is configured from ``CODEX_TALON_*`` environment variables:

``LOG_LEVEL``        minimum level (default ``WARNING``)
``DISABLE_CONSOLE``  keep log lines off the terminal
``NO_COLOR``         plain console output
``LOG_JSON``         JSON formatted records
``LOG_FILE``         also write records to this file
``LOG_BUFFERED``     buffer records (``LOG_BUFFER_SIZE`` entries)
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "CODEX_TALON_"
DEFAULT_LOGGER_NAME = "codex_talon"

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    raw = _env(name)
    return raw is not None and raw.strip().lower() in {"1", "true", "yes", "on"}


def _config_from_env() -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "WARNING").upper())

    # Sender and simulator print JSON on stdout, so console logging is opt-out.
    console = not _env_flag("DISABLE_CONSOLE")
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR"))
    if _env_flag("LOG_JSON"):
        config.with_json_format(True)

    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    if _env_flag("LOG_BUFFERED"):
        config.with_buffering(True)
        config.with_buffer_size(int(_env("LOG_BUFFER_SIZE") or "2048"))

    config.with_profiling(True)
    return config


def configure() -> None:
    """Re-read the environment and drop cached loggers."""

    global _config
    _config = _config_from_env()
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Cached ``telelog.Logger`` bound to the active configuration."""

    global _config
    if _config is None:
        _config = _config_from_env()
    key = name or _env("LOGGER") or DEFAULT_LOGGER_NAME
    logger = _loggers.get(key)
    if logger is None:
        logger = _loggers[key] = tl.Logger.with_config(key, _config)
    return logger


def _text(value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _log(logger: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    method = getattr(logger, f"{level}_with", None)
    if method is not None:
        method(message, [(str(key), _text(value)) for key, value in data.items()])
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {data}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    _log(get_logger(logger_name), level.lower(), f"event::{name}", dict(data or {}))


@dataclass
class SpanHandle:
    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def _payload(self, **extra: Any) -> Dict[str, Any]:
        payload = {"span": self.name, **self.metadata, **extra}
        if self.component:
            payload["component"] = self.component
        return payload

    def done(self) -> None:
        _log(self.logger, "debug", "span::done", self._payload())

    def fail(self, reason: str) -> None:
        _log(self.logger, "error", "span::fail", self._payload(reason=reason))


@contextmanager
def span(
    name: str,
    *,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, tracked as ``component`` when one is given.

    ``metadata`` is pushed as logger context while the block runs; whatever
    the block adds to the handle is reported when it finishes.
    """

    log = get_logger(logger_name)
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(log, name, component, dict(context))
    for key, value in context.items():
        log.add_context(key, value)
    try:
        with ExitStack() as stack:
            if component:
                stack.enter_context(log.track_component(component))
            stack.enter_context(log.profile(name))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
        handle.done()
    finally:
        for key in context:
            log.remove_context(key)


configure()

__all__ = ["SpanHandle", "configure", "get_logger", "record_event", "span"]
