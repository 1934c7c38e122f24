"""Executable Textual app hosting a Talon-driven composer."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the host is run
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use codex_talon.adapters.textual.app"
    ) from exc

from codex_talon.config import TalonConfig
from codex_talon.protocol import EditorState, resolve_paths
from codex_talon.session import SessionContext

from .controller import ComposerUIHooks, Location, TalonComposerController


class TalonComposerApp(App[None]):
    """Composer text area that external Talon requests can drive."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#composer {
		height: 1fr;
		border: round $accent;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "submit", "Submit"),
    ]

    def __init__(self, config: Optional[TalonConfig] = None) -> None:
        super().__init__()
        self.config = config or TalonConfig.from_env()
        self.controller: TalonComposerController | None = None
        self._composer: TextArea | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="composer-area"):
            self._composer = TextArea("", id="composer")
            yield self._composer
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        paths = resolve_paths(self.config.home)
        hooks = ComposerUIHooks(
            update_composer=self._update_composer,
            update_status=self._update_status,
            notify=self.notify,
            log=self._log_line,
        )
        self.controller = TalonComposerController(
            paths,
            hooks,
            context=SessionContext(),
            state=EditorState(session_id=self.config.session_id, cwd=str(Path.cwd())),
        )
        self._update_status(f"Talon requests @ {paths.request_path}")
        self.set_interval(self.config.poll_interval, self._poll_talon)

    def _poll_talon(self) -> None:
        if self.controller:
            self.controller.poll()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._sync(event.text_area)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        self._sync(event.text_area)

    def action_submit(self) -> None:
        if not self.controller:
            return
        submitted = self.controller.submit()
        if submitted.strip():
            self._update_status(f"submitted {len(self.controller.history)} message(s)")

    def _sync(self, text_area: TextArea) -> None:
        if self.controller:
            self.controller.sync_from_host(text_area.text, text_area.cursor_location)

    def _update_composer(self, text: str, location: Location) -> None:
        if not self._composer:
            return
        if self._composer.text != text:
            self._composer.load_text(text)
        self._composer.move_cursor(location)

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        self.log(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="codex-talon", description="Run the Talon-driven composer."
    )
    parser.add_argument(
        "--home",
        type=Path,
        default=None,
        help="Directory holding .codex-talon (default: CODEX_TALON_HOME or ~)",
    )
    parser.add_argument(
        "--poll-interval-ms",
        type=int,
        default=None,
        help="How often to check for a request file (default: 250)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    config = TalonConfig.from_env()
    if args.home is not None:
        config = replace(config, home=args.home)
    if args.poll_interval_ms and args.poll_interval_ms > 0:
        config = replace(config, poll_interval_ms=args.poll_interval_ms)
    TalonComposerApp(config).run()


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
