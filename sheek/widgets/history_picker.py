"""Interactive history picker: search input over a ranked list of commands."""

from __future__ import annotations

import re

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from sheek.enums import SearchMode
from sheek.formatting import format_time_ago, one_line, one_line_positions, truncate
from sheek.models import Command
from sheek.search import SearchResults, search

MAX_RENDERED = 1000  # Rows handed to the OptionList per query
MAX_LINE = 300


class HistoryPicker(Widget):
    """Search box with a live-filtered list of history entries.

    Ctrl+S switches between exact and fuzzy search. Enter selects the
    highlighted entry, Escape cancels.
    """

    DEFAULT_CSS = """\
    HistoryPicker {
        height: auto;
        width: 100%;
        border-left: tall $primary;
        padding: 0 1;

        & #picker-title {
            width: 100%;
            color: $primary;
            text-style: bold;
        }

        & Horizontal {
            width: 100%;
            height: 1;
        }

        & #mode-label {
            width: auto;
            color: $secondary;
            padding-right: 1;
        }

        & #search-input {
            width: 1fr;
            height: 1;
            border: none;
            background: transparent;
            padding: 0;

            &:focus {
                border: none;
            }
        }

        & #match-count {
            width: auto;
            color: $text-muted;
        }

        & OptionList {
            height: auto;
            border: none;
            padding: 0;
            background: transparent;
            scrollbar-size-vertical: 1;
        }

        & OptionList > .option-list--option-highlighted {
            background: $surface;
        }
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True, show=False),
        Binding("enter", "select", "Select", priority=True, show=False),
        Binding("ctrl+s", "toggle_mode", "Toggle mode", priority=True, show=False),
        Binding("up", "cursor_up", "Up", priority=True, show=False),
        Binding("down", "cursor_down", "Down", priority=True, show=False),
    ]

    class Selected(Message):
        """Posted when user selects a history entry."""

        def __init__(self, text: str) -> None:
            self.text = text
            super().__init__()

    class Cancelled(Message):
        """Posted when user cancels the picker."""

    def __init__(
        self,
        commands: list[Command],
        *,
        mode: SearchMode = SearchMode.EXACT,
        query: str = "",
        title: str = "Recent Commands",
        placeholder: str = "Search History...",
        max_items: int = 10,
        max_length: int = 128,
        show_timestamp: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._commands = commands
        self._mode = mode
        self._initial_query = query
        self._title = title
        self._placeholder = placeholder
        self._max_items = max_items
        self._max_length = max_length
        self._show_timestamp = show_timestamp
        self.results = search(commands, query, mode)

    @property
    def mode(self) -> SearchMode:
        return self._mode

    @property
    def option_list(self) -> OptionList:
        return self.query_one(OptionList)

    def compose(self) -> ComposeResult:
        yield Static(self._title, id="picker-title")
        with Horizontal():
            yield Static(self._mode.label, id="mode-label")
            yield Input(
                value=self._initial_query,
                placeholder=self._placeholder,
                max_length=self._max_length,
                id="search-input",
            )
            yield Static("", id="match-count")
        option_list = OptionList()
        option_list.can_focus = False
        yield option_list

    def on_mount(self) -> None:
        self.option_list.styles.max_height = self._max_items
        self._render_results()
        self.query_one("#search-input", Input).focus()

    def set_query(self, query: str) -> None:
        """Re-run the search for query and redraw."""
        self.results = search(self._commands, query, self._mode)
        self._render_results()

    def current_command(self) -> Command | None:
        """The highlighted command, if any."""
        highlighted = self.option_list.highlighted
        if highlighted is None or highlighted >= len(self.results.commands):
            return None
        return self.results.commands[highlighted]

    def _render_results(self) -> None:
        results = self.results
        option_list = self.option_list
        option_list.clear_options()
        option_list.add_options(
            Option(self._render_command(cmd, results))
            for cmd in results.commands[:MAX_RENDERED]
        )
        if results.commands:
            option_list.highlighted = 0

        self.query_one("#mode-label", Static).update(results.mode.label)
        self.query_one("#match-count", Static).update(
            f"{len(results.commands)}/{len(self._commands)}"
        )

    def _render_command(self, cmd: Command, results: SearchResults) -> Text:
        line = Text()
        if self._show_timestamp:
            line.append(f"{format_time_ago(cmd.timestamp):>8}  ", style="dim")
        offset = len(line)

        display = truncate(one_line(cmd.text), MAX_LINE)
        line.append(display)

        if results.mode is SearchMode.FUZZY:
            for pos in one_line_positions(cmd.text, results.positions.get(cmd.index, [])):
                if pos < len(display):
                    line.stylize("bold #ffd700", offset + pos, offset + pos + 1)
        elif results.query.strip():
            pattern = re.compile(re.escape(results.query), re.IGNORECASE)
            for match in pattern.finditer(display):
                line.stylize("bold #ffd700", offset + match.start(), offset + match.end())
        return line

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter history as user types."""
        self.set_query(event.value)

    def action_toggle_mode(self) -> None:
        self._mode = self._mode.toggle()
        self.set_query(self.results.query)

    def action_cursor_up(self) -> None:
        self.option_list.action_cursor_up()

    def action_cursor_down(self) -> None:
        self.option_list.action_cursor_down()

    def action_select(self) -> None:
        cmd = self.current_command()
        if cmd is not None:
            self.post_message(self.Selected(cmd.text))

    def action_cancel(self) -> None:
        self.post_message(self.Cancelled())
