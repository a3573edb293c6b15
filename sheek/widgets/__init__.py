"""Textual widgets for the sheek picker."""

from sheek.widgets.history_picker import HistoryPicker

__all__ = ["HistoryPicker"]
