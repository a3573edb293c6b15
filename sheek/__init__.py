"""Sheek - context-aware search over your shell history."""

from sheek.enums import CommandSource, SearchMode, Shell
from sheek.models import Command, CommandContext, HistoryRecord
from sheek.ranking import apply_context_boost
from sheek.search import SearchResults, search, search_exact, search_fuzzy

__all__ = [
    "Command",
    "CommandContext",
    "CommandSource",
    "HistoryRecord",
    "SearchMode",
    "SearchResults",
    "Shell",
    "apply_context_boost",
    "search",
    "search_exact",
    "search_fuzzy",
]
__version__ = "0.1.0"
