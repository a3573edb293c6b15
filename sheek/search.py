"""Exact and fuzzy search over loaded commands.

Both modes are case-insensitive pure functions of (commands, query). A blank
query returns the input unchanged, in input order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from sheek.enums import SearchMode
from sheek.models import Command

BASE_SCORE = 1000
CONSECUTIVE_BONUS = 50
START_BONUS = 100
NEAR_START_BONUS = 50  # minus 10 per position, first 5 positions only
CASE_BONUS = 5
SPREAD_PENALTY = 2


@dataclass(frozen=True)
class FuzzyMatch:
    """A command with its fuzzy score and matched character positions."""

    command: Command
    score: int
    positions: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class SearchResults:
    """Everything the presentation layer needs for one query.

    positions holds character offsets into each Command.text (str indices,
    not UTF-8 byte offsets), so text[i] is the matched character.
    """

    mode: SearchMode
    query: str
    commands: list[Command]
    positions: dict[int, list[int]] = field(default_factory=dict)  # Command.index -> positions


def search_exact(commands: Sequence[Command], query: str) -> list[Command]:
    """Keep commands whose text contains query (case-insensitive)."""
    if not query.strip():
        return list(commands)
    query_lower = query.lower()
    return [cmd for cmd in commands if query_lower in cmd.text.lower()]


def find_fuzzy_positions(text: str, query: str) -> list[int]:
    """Find positions where each query character appears in order.

    Single greedy pass through text with no backtracking. Returns [] if not
    all characters can be matched. Positions index into the original text.
    """
    if not query:
        return []

    text_lower = [c.lower() for c in text]
    positions: list[int] = []
    text_idx = 0
    for query_char in query:
        query_char = query_char.lower()
        while text_idx < len(text_lower) and text_lower[text_idx] != query_char:
            text_idx += 1
        if text_idx >= len(text_lower):
            return []
        positions.append(text_idx)
        text_idx += 1
    return positions


def fuzzy_score(text: str, query: str, positions: Sequence[int]) -> int:
    """Relevance of a fuzzy match. Always >= 1 for a match.

    Rewards adjacent matched characters, an early first match and exact-case
    characters; penalizes matches spread wider than the query.
    """
    score = BASE_SCORE

    for prev, cur in zip(positions, positions[1:]):
        if cur == prev + 1:
            score += CONSECUTIVE_BONUS

    first = positions[0]
    if first == 0:
        score += START_BONUS
    elif first < 5:
        score += NEAR_START_BONUS - first * 10

    for i, pos in enumerate(positions):
        if text[pos] == query[i]:
            score += CASE_BONUS

    spread = positions[-1] - first
    if spread > len(query):
        score -= (spread - len(query)) * SPREAD_PENALTY

    return max(score, 1)


def search_fuzzy_with_positions(
    commands: Sequence[Command], query: str
) -> list[FuzzyMatch]:
    """Fuzzy-match commands, best first.

    Sorted by score descending, then by index ascending.
    """
    if not query.strip():
        return [FuzzyMatch(command=cmd, score=0, positions=[]) for cmd in commands]

    matches: list[FuzzyMatch] = []
    for cmd in commands:
        positions = find_fuzzy_positions(cmd.text, query)
        if not positions:
            continue
        matches.append(
            FuzzyMatch(
                command=cmd,
                score=fuzzy_score(cmd.text, query, positions),
                positions=positions,
            )
        )

    matches.sort(key=lambda m: (-m.score, m.command.index))
    return matches


def search_fuzzy(commands: Sequence[Command], query: str) -> list[Command]:
    """Fuzzy-match commands, best first."""
    return [m.command for m in search_fuzzy_with_positions(commands, query)]


def search(
    commands: Sequence[Command], query: str, mode: SearchMode = SearchMode.EXACT
) -> SearchResults:
    """Run a query in the given mode."""
    if mode is SearchMode.FUZZY:
        matches = search_fuzzy_with_positions(commands, query)
        return SearchResults(
            mode=mode,
            query=query,
            commands=[m.command for m in matches],
            positions={m.command.index: m.positions for m in matches},
        )
    return SearchResults(mode=mode, query=query, commands=search_exact(commands, query))
