"""
Tests for box-score stat normalization.
"""

from __future__ import annotations

import logging

from conftest import (
    DEFENSIVE_KEYS,
    INTERCEPTION_KEYS,
    KICK_RETURN_KEYS,
    KICKING_KEYS,
    PASSING_KEYS,
    PUNT_RETURN_KEYS,
    RECEIVING_KEYS,
    RUSHING_KEYS,
    make_category,
    make_team_block,
)

from college_tracker.normalizers.stats import empty_bundle, normalize_player_stats


class TestCategories:
    def test_passing_line(self):
        players = [
            make_team_block(
                "MIA",
                [make_category("passing", PASSING_KEYS, {"1": ["21/30", "251", "8.4", "2", "1", "2-14"]})],
            )
        ]
        result = normalize_player_stats(players)

        entry = result["1"]
        assert entry.team_abbr == "MIA"
        assert entry.stats.passing.model_dump() == {
            "completions": 21,
            "attempts": 30,
            "yards": 251,
            "touchdowns": 2,
            "interceptions": 1,
        }
        assert entry.stats.rushing is None
        assert entry.stats.defense is None

    def test_rushing_and_receiving_are_independent_groups(self):
        players = [
            make_team_block(
                "MIA",
                [
                    make_category("rushing", RUSHING_KEYS, {"2": ["14", "87", "6.2", "1", "22"]}),
                    make_category("receiving", RECEIVING_KEYS, {"2": ["3", "19", "6.3", "0", "11"]}),
                ],
            )
        ]
        stats = normalize_player_stats(players)["2"].stats

        assert (stats.rushing.attempts, stats.rushing.yards, stats.rushing.touchdowns) == (14, 87, 1)
        assert (stats.receiving.receptions, stats.receiving.yards, stats.receiving.touchdowns) == (3, 19, 0)
        assert stats.passing is None

    def test_kicking_composites(self):
        players = [
            make_team_block(
                "NYJ",
                [make_category("kicking", KICKING_KEYS, {"9": ["2/3", "66.7", "48", "3/3", "9"]})],
            )
        ]
        kicking = normalize_player_stats(players)["9"].stats.kicking

        assert kicking.field_goals_made == 2
        assert kicking.field_goals_attempted == 3
        assert kicking.extra_points_made == 3
        assert kicking.extra_points_attempted == 3

    def test_unrecognized_category_is_ignored(self):
        players = [make_team_block("MIA", [make_category("fumbles", ["fumblesLost"], {"4": ["1"]})])]
        assert normalize_player_stats(players) == {}

    def test_extra_keys_and_short_value_lists(self):
        players = [
            make_team_block(
                "MIA",
                [make_category("rushing", RUSHING_KEYS, {"5": ["3"]})],
            )
        ]
        rushing = normalize_player_stats(players)["5"].stats.rushing
        assert (rushing.attempts, rushing.yards, rushing.touchdowns) == (3, 0, 0)


class TestDefenseMerge:
    def test_defensive_then_interceptions(self):
        players = [
            make_team_block(
                "MIA",
                [
                    make_category("defensive", DEFENSIVE_KEYS, {"7": ["7", "5", "0", "1", "2"]}),
                    make_category("interceptions", INTERCEPTION_KEYS, {"7": ["1", "23", "0"]}),
                ],
            )
        ]
        defense = normalize_player_stats(players)["7"].stats.defense
        assert defense.model_dump() == {"tackles": 7, "sacks": 0.0, "interceptions": 1}

    def test_interceptions_then_defensive(self):
        players = [
            make_team_block(
                "MIA",
                [
                    make_category("interceptions", INTERCEPTION_KEYS, {"7": ["1", "23", "0"]}),
                    make_category("defensive", DEFENSIVE_KEYS, {"7": ["7", "5", "0", "1", "2"]}),
                ],
            )
        ]
        defense = normalize_player_stats(players)["7"].stats.defense
        assert defense.model_dump() == {"tackles": 7, "sacks": 0.0, "interceptions": 1}

    def test_half_sack(self):
        players = [
            make_team_block(
                "MIA",
                [make_category("defensive", DEFENSIVE_KEYS, {"8": ["4", "3", "1.5", "2", "0"]})],
            )
        ]
        defense = normalize_player_stats(players)["8"].stats.defense
        assert defense.sacks == 1.5
        assert defense.interceptions == 0


class TestReturns:
    def test_kick_and_punt_returns_accumulate(self):
        players = [
            make_team_block(
                "NYJ",
                [
                    make_category("kickReturns", KICK_RETURN_KEYS, {"11": ["2", "48", "24.0", "30", "0"]}),
                    make_category("puntReturns", PUNT_RETURN_KEYS, {"11": ["3", "31", "10.3", "18", "1"]}),
                ],
            )
        ]
        returns = normalize_player_stats(players)["11"].stats.returns
        assert returns.model_dump() == {"count": 5, "yards": 79, "touchdowns": 1}


class TestAbsenceAndMalformedInput:
    def test_zero_category_player_is_absent(self):
        players = [
            make_team_block(
                "MIA",
                [make_category("passing", PASSING_KEYS, {"1": ["21/30", "251", "8.4", "2", "1", "2-14"]})],
            )
        ]
        result = normalize_player_stats(players)
        assert "2" not in result
        assert empty_bundle().is_empty()

    def test_players_block_not_a_list(self):
        assert normalize_player_stats(None) == {}
        assert normalize_player_stats({"oops": True}) == {}

    def test_malformed_blocks_are_skipped(self, caplog):
        players = [
            {"statistics": []},  # no team
            make_team_block(
                "MIA",
                [
                    {"keys": ["x"], "athletes": []},  # no name
                    make_category("rushing", RUSHING_KEYS, {"3": ["5", "20", "4.0", "0", "9"]}),
                    {
                        "name": "receiving",
                        "keys": RECEIVING_KEYS,
                        "athletes": [
                            {"athlete": {}, "stats": ["1", "2", "2.0", "0", "2"]},  # no id
                            {"athlete": {"id": 3}, "stats": ["2", "15", "7.5", "1", "10"]},
                        ],
                    },
                ],
            ),
        ]
        with caplog.at_level(logging.WARNING):
            result = normalize_player_stats(players)

        assert list(result) == ["3"]
        stats = result["3"].stats
        assert stats.rushing.yards == 20
        assert stats.receiving.touchdowns == 1
        assert "Skipping malformed" in caplog.text

    def test_null_keys_and_stats(self):
        players = [
            make_team_block(
                "MIA",
                [{"name": "rushing", "keys": None, "athletes": [{"athlete": {"id": "6"}, "stats": None}]}],
            )
        ]
        rushing = normalize_player_stats(players)["6"].stats.rushing
        assert rushing.model_dump() == {"attempts": 0, "yards": 0, "touchdowns": 0}
