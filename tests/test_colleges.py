"""
Tests for the college aggregation pass.
"""

from __future__ import annotations

import json

import pytest

from conftest import (
    PASSING_KEYS,
    RECEIVING_KEYS,
    RUSHING_KEYS,
    make_category,
    make_package,
    make_team_block,
)

from college_tracker.aggregators.colleges import (
    build_college_aggregates,
    build_players_by_college,
    write_college_aggregates,
)
from college_tracker.core.models import BaselinePlayer
from college_tracker.normalizers.game_meta import extract_game_meta
from college_tracker.normalizers.stats import normalize_player_stats
from college_tracker.store.documents import DocumentNotFoundError
from college_tracker.store.roster import RosterFormatError, RosterNotFoundError


def _merge(player_store, baseline, package):
    meta = extract_game_meta(package)
    stats = normalize_player_stats(package["boxscore"]["players"])
    entry = stats.get(baseline.id)
    return player_store.upsert_game(
        baseline.id, baseline, meta, baseline.nfl_team_abbr, entry.stats if entry else None
    )


class TestBuildAggregates:
    def test_groups_by_slug_with_defaults(self, player_store):
        roster = [
            BaselinePlayer(id="1", name="A", position="QB", college="Alabama", nfl_team="Miami Dolphins"),
            BaselinePlayer(id="2", college="Alabama"),
            BaselinePlayer(id="3", name="C", position="CB", college="North Dakota State", nfl_team="Denver Broncos"),
            BaselinePlayer(id="4", name="D"),
        ]
        aggregates = build_college_aggregates(roster, player_store)

        assert list(aggregates) == ["ala", "north-dakota-state", "unknown"]

        alabama = aggregates["ala"]
        assert alabama.college == "Alabama"
        assert alabama.conference == alabama.group == "SEC"
        assert [p.id for p in alabama.players] == ["1", "2"]
        defaults = alabama.players[1]
        assert (defaults.name, defaults.position, defaults.nfl_team) == ("Unknown Player", "UNK", "Free Agent")
        assert defaults.last_game is None

        assert aggregates["north-dakota-state"].conference == "FCS / Other"
        assert aggregates["unknown"].college == "Unknown"
        assert aggregates["unknown"].conference == "FCS / Other"

    def test_duplicate_roster_ids_counted_once(self, player_store):
        roster = [BaselinePlayer(id="1", college="Iowa"), BaselinePlayer(id="1", college="Iowa")]
        aggregates = build_college_aggregates(roster, player_store)
        assert aggregates["iowa"].player_count == 1

    def test_players_by_college_index(self, player_store):
        roster = [
            BaselinePlayer(id="1", college="Iowa"),
            BaselinePlayer(id="2", college="LSU"),
            BaselinePlayer(id="3", college="Iowa"),
        ]
        index = build_players_by_college(build_college_aggregates(roster, player_store).values())
        assert index == {"iowa": ["1", "3"], "lsu": ["2"]}


class TestEndToEnd:
    def test_two_games_distinct_categories(self, player_store, roster_store, documents, tua):
        roster_store.save([tua])
        player_store.seed(tua)

        g1 = make_package(
            game_id="G1",
            date="2025-12-07T18:00Z",
            players=[
                make_team_block(
                    "MIA",
                    [make_category("passing", PASSING_KEYS, {tua.id: ["21/30", "251", "8.4", "2", "1", "2-14"]})],
                )
            ],
        )
        g2 = make_package(
            game_id="G2",
            date="2025-12-14T18:00Z",
            players=[
                make_team_block(
                    "MIA",
                    [
                        make_category("rushing", RUSHING_KEYS, {tua.id: ["4", "12", "3.0", "1", "6"]}),
                        make_category("receiving", RECEIVING_KEYS, {tua.id: ["1", "5", "5.0", "0", "5"]}),
                    ],
                )
            ],
        )
        _merge(player_store, tua, g1)
        player = _merge(player_store, tua, g2)

        assert player.last_game_id == "G2"
        assert set(player.game_logs) == {"G1", "G2"}
        assert player.game_logs["G1"].player_stats.passing.yards == 251
        assert player.game_logs["G1"].player_stats.rushing is None
        assert player.game_logs["G2"].player_stats.passing is None
        assert player.game_logs["G2"].player_stats.rushing.touchdowns == 1

        result = write_college_aggregates(roster_store, player_store, documents)
        assert result.aggregates_written == 1

        alabama = documents.read_college("ala")
        assert alabama.conference == "SEC"
        assert [p.id for p in alabama.players] == [tua.id]
        assert alabama.players[0].last_game == player.game_logs["G2"]

        on_disk = json.loads(documents.aggregate_path("ala").read_text())
        assert on_disk["players"][0]["nflTeam"] == "Miami Dolphins"
        assert on_disk["players"][0]["lastGame"]["gameId"] == "G2"
        assert documents.aggregate_path("ala").name == "collegePage_ALA.json"


class TestWritePass:
    def test_missing_roster_raises(self, roster_store, player_store, documents):
        with pytest.raises(RosterNotFoundError):
            write_college_aggregates(roster_store, player_store, documents)

    def test_roster_must_be_a_list(self, settings, roster_store, player_store, documents):
        settings.roster_path.parent.mkdir(parents=True)
        settings.roster_path.write_text(json.dumps({"players": []}))
        with pytest.raises(RosterFormatError):
            write_college_aggregates(roster_store, player_store, documents)

    def test_roster_entries_without_id_are_skipped(self, settings, roster_store):
        settings.roster_path.parent.mkdir(parents=True)
        settings.roster_path.write_text(
            json.dumps([{"name": "No Id", "college": "Iowa"}, {"id": 12, "name": "Has Id", "nfl_team": "Chicago Bears"}])
        )
        roster = roster_store.load()
        assert [p.id for p in roster] == ["12"]
        assert roster[0].nfl_team == "Chicago Bears"

    def test_stale_aggregates_removed_and_index_written(self, roster_store, player_store, documents):
        roster_store.save([BaselinePlayer(id="1", college="Iowa"), BaselinePlayer(id="2", college="LSU")])
        write_college_aggregates(roster_store, player_store, documents)
        assert documents.aggregate_path("lsu").exists()

        roster_store.save([BaselinePlayer(id="1", college="Iowa")])
        result = write_college_aggregates(roster_store, player_store, documents)

        assert result.stale_removed == ["lsu"]
        assert not documents.aggregate_path("lsu").exists()
        assert documents.read_players_by_college() == {"iowa": ["1"]}
        with pytest.raises(DocumentNotFoundError):
            documents.read_college("lsu")
