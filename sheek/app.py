"""Sheek picker application."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding

from sheek.config import CONFIG, save as save_config
from sheek.enums import SearchMode
from sheek.errors import set_notify_callback
from sheek.models import Command
from sheek.theme import SHEEK_THEME, load_custom_themes
from sheek.widgets import HistoryPicker

log = logging.getLogger(__name__)


class SheekApp(App[str]):
    """Inline picker over ranked history. Exits with the chosen command."""

    CSS = """
    Screen {
        height: auto;
        background: $background;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "cancel", "Cancel", priority=True, show=False),
    ]

    def __init__(
        self,
        commands: list[Command],
        initial_query: str = "",
        empty_hint: str | None = None,
    ) -> None:
        super().__init__()
        if CONFIG.get("reverse"):
            commands = list(reversed(commands))
        self._commands = commands
        self._initial_query = initial_query
        self._empty_hint = empty_hint
        self._theme_ready = False

    def compose(self) -> ComposeResult:
        yield HistoryPicker(
            self._commands,
            mode=SearchMode(CONFIG.get("mode") or SearchMode.EXACT),
            query=self._initial_query,
            title=CONFIG.get("title") or "Recent Commands",
            placeholder=CONFIG.get("placeholder") or "",
            max_items=CONFIG.get("max-items") or 10,
            max_length=CONFIG.get("limit") or 128,
            show_timestamp=bool(CONFIG.get("show-timestamp", True)),
            id="picker",
        )

    def on_mount(self) -> None:
        set_notify_callback(
            lambda msg, severity: self.notify(msg, severity=severity, timeout=5)
        )

        # Register themes (sheek default + user-defined from config)
        self.register_theme(SHEEK_THEME)
        for theme in load_custom_themes():
            self.register_theme(theme)
        theme = CONFIG.get("theme") or SHEEK_THEME.name
        if theme not in self.available_themes:
            log.warning("Unknown theme %r", theme)
            theme = SHEEK_THEME.name
        self.theme = theme
        self._theme_ready = True

        if self._empty_hint:
            self.notify(self._empty_hint, severity="warning", timeout=5)

    def on_unmount(self) -> None:
        set_notify_callback(None)

    def watch_theme(self, theme: str) -> None:
        """Save theme preference when changed."""
        if not getattr(self, "_theme_ready", False):
            return
        if theme != CONFIG.get("theme"):
            CONFIG["theme"] = theme
            save_config()

    def on_history_picker_selected(self, event: HistoryPicker.Selected) -> None:
        self.exit(event.text)

    def on_history_picker_cancelled(self, event: HistoryPicker.Cancelled) -> None:
        self.exit(None)

    def action_cancel(self) -> None:
        self.exit(None)
