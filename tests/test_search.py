"""Tests for exact and fuzzy history search."""

import pytest

from sheek.enums import SearchMode
from sheek.search import (
    find_fuzzy_positions,
    fuzzy_score,
    search,
    search_exact,
    search_fuzzy,
    search_fuzzy_with_positions,
)


@pytest.fixture
def commands(command_factory):
    return [
        command_factory(1, "git commit -m 'initial commit'"),
        command_factory(2, "ls -la"),
        command_factory(3, "Git Status"),
        command_factory(4, "docker compose up -d"),
        command_factory(5, "echo one\necho two"),
    ]


class TestSearchExact:
    """Test search_exact filtering."""

    @pytest.mark.parametrize("query", ["", "   ", "\t"])
    def test_blank_query_is_identity(self, commands, query):
        assert search_exact(commands, query) == commands

    def test_substring_case_insensitive(self, commands):
        results = search_exact(commands, "GIT")
        assert [c.index for c in results] == [1, 3]

    def test_preserves_input_order(self, commands):
        """Exact mode never reorders (input is already ranked)."""
        reordered = list(reversed(commands))
        results = search_exact(reordered, "git")
        assert [c.index for c in results] == [3, 1]

    def test_requires_contiguous_match(self, commands):
        assert search_exact(commands, "gcm") == []

    def test_substring_of_text_always_matches(self, command_factory):
        cmd = command_factory(1, "kubectl get pods --namespace Prod")
        for start in range(len(cmd.text)):
            for end in range(start + 1, len(cmd.text) + 1, 5):
                query = cmd.text[start:end].swapcase()
                if query.strip():
                    assert search_exact([cmd], query) == [cmd]

    def test_matches_across_newline(self, commands):
        results = search_exact(commands, "one\necho")
        assert [c.index for c in results] == [5]

    def test_does_not_mutate_input(self, commands):
        before = list(commands)
        search_exact(commands, "git")
        assert commands == before


class TestFindFuzzyPositions:
    """Test ordered-subsequence matching."""

    def test_subsequence_match(self):
        assert find_fuzzy_positions("git commit", "gcm") == [0, 4, 6]

    def test_no_match(self):
        assert find_fuzzy_positions("git commit", "xyzabc") == []

    def test_out_of_order_fails(self):
        assert find_fuzzy_positions("abc", "cba") == []

    def test_case_insensitive(self):
        assert find_fuzzy_positions("Git Status", "gs") == [0, 4]

    def test_greedy_no_backtracking(self):
        """First occurrence is taken even if a later one would be tighter."""
        assert find_fuzzy_positions("a_x_ab", "ab") == [0, 5]

    def test_repeated_characters_consume_text(self):
        assert find_fuzzy_positions("aa", "aaa") == []
        assert find_fuzzy_positions("aaa", "aa") == [0, 1]

    def test_empty_query(self):
        assert find_fuzzy_positions("anything", "") == []

    def test_positions_increase_and_count_matches_query(self):
        text = "docker compose up -d --build"
        query = "dcpb"
        positions = find_fuzzy_positions(text, query)
        assert len(positions) == len(query)
        assert positions == sorted(positions)
        assert len(set(positions)) == len(positions)

    def test_positions_are_character_offsets(self):
        text = "café über → naïve"
        positions = find_fuzzy_positions(text, "éün")
        assert positions == [3, 5, 12]
        assert [text[i] for i in positions] == ["é", "ü", "n"]


class TestFuzzyScore:
    """Test fuzzy relevance scoring."""

    def test_base_score_with_start_bonus(self):
        # a at 0, b at 1: base + consecutive + start + 2 case bonuses
        assert fuzzy_score("ab", "ab", [0, 1]) == 1000 + 50 + 100 + 10

    def test_near_start_bonus(self):
        # first match at 2: 50 - 20
        assert fuzzy_score("xxa", "a", [2]) == 1000 + 30 + 5

    def test_no_start_bonus_after_five(self):
        assert fuzzy_score("xxxxxa", "a", [5]) == 1000 + 5

    def test_case_bonus_only_for_exact_case(self):
        assert fuzzy_score("A", "a", [0]) == 1000 + 100
        assert fuzzy_score("a", "a", [0]) == 1000 + 100 + 5

    def test_spread_penalty(self):
        text = "a" + "x" * 20 + "b"
        # spread 21 > len 2: penalty 2 * 19
        assert fuzzy_score(text, "ab", [0, 21]) == 1000 + 100 + 10 - 38

    def test_score_floor(self):
        text = "a" + "x" * 2000 + "b"
        assert fuzzy_score(text, "ab", [0, 2001]) == 1

    def test_start_position_monotonicity(self):
        """First match at 0 beats first match at 5+ with the same spread."""
        at_start = fuzzy_score("ab______", "ab", [0, 1])
        later = fuzzy_score("_____ab_", "ab", [5, 6])
        assert at_start >= later
        assert at_start - later == 100


class TestSearchFuzzy:
    """Test fuzzy search ordering and results."""

    @pytest.mark.parametrize("query", ["", "  "])
    def test_blank_query_is_identity(self, commands, query):
        assert search_fuzzy(commands, query) == commands
        matches = search_fuzzy_with_positions(commands, query)
        assert [m.command for m in matches] == commands
        assert all(m.positions == [] for m in matches)

    def test_subsequence_match(self, commands):
        results = search_fuzzy(commands, "gcm")
        assert [c.index for c in results] == [1]

    def test_unrealistic_query_matches_nothing(self, commands):
        assert search_fuzzy(commands, "xyzabc") == []

    def test_sorted_by_score(self, command_factory):
        cmds = [
            command_factory(1, "xx g_i_t"),
            command_factory(2, "git"),
        ]
        results = search_fuzzy(cmds, "git")
        assert [c.index for c in results] == [2, 1]

    def test_ties_prefer_lower_index(self, command_factory):
        cmds = [command_factory(7, "make"), command_factory(2, "make")]
        results = search_fuzzy(cmds, "make")
        assert [c.index for c in results] == [2, 7]

    def test_positions_reported(self, commands):
        matches = search_fuzzy_with_positions(commands, "gs")
        by_index = {m.command.index: m.positions for m in matches}
        assert by_index[3] == [0, 4]
        assert all(m.score >= 1 for m in matches)

    def test_does_not_mutate_input(self, commands):
        before = list(commands)
        search_fuzzy(commands, "ls")
        assert commands == before


class TestSearch:
    """Test the mode dispatcher."""

    def test_exact_mode_has_no_positions(self, commands):
        results = search(commands, "git", SearchMode.EXACT)
        assert results.mode is SearchMode.EXACT
        assert [c.index for c in results.commands] == [1, 3]
        assert results.positions == {}

    def test_fuzzy_mode_positions_keyed_by_index(self, commands):
        results = search(commands, "gcm", SearchMode.FUZZY)
        assert results.mode is SearchMode.FUZZY
        assert results.positions == {1: [0, 4, 6]}

    def test_repeated_queries_are_independent(self, commands):
        first = search(commands, "git", SearchMode.FUZZY)
        search(commands, "docker", SearchMode.FUZZY)
        again = search(commands, "git", SearchMode.FUZZY)
        assert first == again

    def test_fuzzy_positions_index_characters_of_non_ascii_text(self, command_factory):
        commands = [command_factory(1, "echo 日本語 ✓ done")]
        results = search(commands, "語✓d", SearchMode.FUZZY)
        positions = results.positions[1]
        assert positions == [7, 9, 11]
        assert "".join(commands[0].text[i] for i in positions) == "語✓d"
