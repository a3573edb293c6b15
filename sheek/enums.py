"""Enums for magic strings used throughout the codebase."""

from enum import Enum


class StrEnum(str, Enum):
    """String enum base class (compatible with Python < 3.11)."""

    def __str__(self) -> str:
        return self.value


class CommandSource(StrEnum):
    """Where a command came from."""

    UNKNOWN = "unknown"
    SHEEK = "sheek"  # Native log, carries context


class SearchMode(StrEnum):
    """Search modes offered by the picker."""

    EXACT = "exact"
    FUZZY = "fuzzy"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def toggle(self) -> "SearchMode":
        """Switch between exact and fuzzy."""
        if self is SearchMode.EXACT:
            return SearchMode.FUZZY
        return SearchMode.EXACT


class Shell(StrEnum):
    """Shells whose native history can be imported."""

    ZSH = "zsh"
    BASH = "bash"
    FISH = "fish"
