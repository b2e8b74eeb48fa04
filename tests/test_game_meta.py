"""
Tests for game meta extraction.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from conftest import make_competitor, make_package, make_scoreboard_event

from college_tracker.core.types import GameStatus
from college_tracker.normalizers.game_meta import (
    extract_game_meta,
    extract_scoreboard_games,
    parse_game_date,
    resolve_status,
)
from college_tracker.providers.base import BoxscoreShapeError


class TestStatus:
    def test_final(self):
        status, clock = resolve_status({"type": {"state": "post", "completed": True, "shortDetail": "Final"}})
        assert status is GameStatus.final
        assert clock is None

    def test_in_progress_keeps_clock(self):
        status, clock = resolve_status({"type": {"state": "in", "completed": False, "shortDetail": "2:00 - 4th"}})
        assert status is GameStatus.in_progress
        assert clock == "2:00 - 4th"

    def test_in_state_wins_over_completed(self):
        status, _ = resolve_status({"type": {"state": "in", "completed": True}})
        assert status is GameStatus.in_progress

    def test_scheduled_by_default(self):
        assert resolve_status({"type": {"state": "pre", "shortDetail": "12/7 - 1:00 PM"}}) == (
            GameStatus.scheduled,
            None,
        )
        assert resolve_status(None) == (GameStatus.scheduled, None)

    def test_status_order(self):
        assert GameStatus.scheduled.rank < GameStatus.in_progress.rank < GameStatus.final.rank


class TestGameDate:
    def test_utc_instant_truncated(self):
        assert parse_game_date("2025-12-07T18:00Z") == date(2025, 12, 7)

    def test_offset_converted_to_utc(self):
        assert parse_game_date("2025-12-07T21:15-05:00") == date(2025, 12, 8)

    def test_plain_date(self):
        assert parse_game_date("2025-12-07") == date(2025, 12, 7)

    @pytest.mark.parametrize("raw", [None, "", "next sunday"])
    def test_bad_dates_raise(self, raw):
        with pytest.raises(BoxscoreShapeError):
            parse_game_date(raw)


class TestExtractGameMeta:
    def test_two_competitors_linked(self):
        meta = extract_game_meta(make_package(game_id="401772790"))

        assert meta.game_id == "401772790"
        assert meta.game_date == date(2025, 12, 7)
        assert meta.status is GameStatus.final
        assert meta.clock_text is None

        mia = meta.teams["MIA"]
        assert mia.is_home is True
        assert mia.team_score == 24
        assert (mia.opponent_abbr, mia.opponent_name, mia.opponent_score) == ("NYJ", "New York Jets", 17)

        nyj = meta.teams["NYJ"]
        assert nyj.is_home is False
        assert (nyj.opponent_abbr, nyj.opponent_score) == ("MIA", 24)

    def test_live_game_clock(self):
        meta = extract_game_meta(make_package(state="in", completed=False, short_detail="8:12 - 3rd"))
        assert meta.status is GameStatus.in_progress
        assert meta.clock_text == "8:12 - 3rd"

    def test_unparseable_score_is_zero(self):
        package = make_package(
            competitors=[
                make_competitor("MIA", "Miami Dolphins", "home", ""),
                make_competitor("NYJ", "New York Jets", "away", None),
            ]
        )
        meta = extract_game_meta(package)
        assert meta.teams["MIA"].team_score == 0
        assert meta.teams["MIA"].opponent_score == 0

    @pytest.mark.parametrize("count", [1, 3])
    def test_competitor_count_other_than_two_leaves_opponents_unset(self, count):
        competitors = [
            make_competitor("MIA", "Miami Dolphins", "home", "24"),
            make_competitor("NYJ", "New York Jets", "away", "17"),
            make_competitor("BUF", "Buffalo Bills", "away", "3"),
        ][:count]
        meta = extract_game_meta(make_package(competitors=competitors))

        assert len(meta.teams) == count
        for info in meta.teams.values():
            assert info.opponent_abbr is None
            assert info.opponent_name is None
            assert info.opponent_score is None

    def test_missing_header(self):
        with pytest.raises(BoxscoreShapeError):
            extract_game_meta({"boxscore": {}})

    def test_missing_competitions(self):
        package = make_package()
        package["header"]["competitions"] = []
        with pytest.raises(BoxscoreShapeError):
            extract_game_meta(package)

    def test_missing_date(self):
        package = make_package()
        del package["header"]["competitions"][0]["date"]
        with pytest.raises(BoxscoreShapeError):
            extract_game_meta(package)

    def test_document_shape(self):
        doc = extract_game_meta(make_package()).to_document()
        assert doc["date"] == "2025-12-07"
        assert doc["teams"]["MIA"]["teamAbbr"] == "MIA"
        assert doc["teams"]["MIA"]["opponentScore"] == 17

    def test_status_type_not_an_object(self):
        package = make_package()
        package["header"]["competitions"][0]["status"] = {"type": "STATUS_FINAL"}
        with pytest.raises(BoxscoreShapeError):
            extract_game_meta(package)

    def test_competitions_not_a_list(self):
        package = make_package()
        package["header"]["competitions"] = {"0": package["header"]["competitions"][0]}
        with pytest.raises(BoxscoreShapeError):
            extract_game_meta(package)

    def test_header_not_an_object(self):
        with pytest.raises(BoxscoreShapeError):
            extract_game_meta({"header": "401772790"})

    def test_malformed_competitor_skipped(self, caplog):
        package = make_package()
        package["header"]["competitions"][0]["competitors"][1]["team"] = "NYJ"

        with caplog.at_level(logging.WARNING):
            meta = extract_game_meta(package)

        assert list(meta.teams) == ["MIA"]
        assert meta.teams["MIA"].opponent_abbr is None
        assert "skipping malformed competitor" in caplog.text
        assert "only 1 of 2 competitors usable" in caplog.text

    def test_competitor_without_abbreviation_reported_as_unusable(self, caplog):
        nameless = make_competitor("", "Mystery Team", "away", "17")
        package = make_package(competitors=[make_competitor("MIA", "Miami Dolphins", "home", "24"), nameless])

        with caplog.at_level(logging.WARNING):
            meta = extract_game_meta(package)

        assert list(meta.teams) == ["MIA"]
        assert "only 1 of 2 competitors usable" in caplog.text
        assert "has 2 competitors" not in caplog.text

    def test_numeric_game_id(self):
        package = make_package()
        package["header"]["id"] = 401772790
        assert extract_game_meta(package).game_id == "401772790"


class TestScoreboard:
    def test_one_meta_per_event(self):
        scoreboard = {
            "events": [
                make_scoreboard_event("E1", state="post", completed=True),
                make_scoreboard_event("E2", state="in", completed=False, short_detail="5:31 - 2nd"),
                make_scoreboard_event("E3", state="pre", completed=False, short_detail="12/8 - 8:15 PM"),
            ]
        }

        games = extract_scoreboard_games(scoreboard)

        assert [(g.game_id, g.status) for g in games] == [
            ("E1", GameStatus.final),
            ("E2", GameStatus.in_progress),
            ("E3", GameStatus.scheduled),
        ]
        assert games[1].clock_text == "5:31 - 2nd"
        assert games[0].teams["MIA"].opponent_abbr == "NYJ"

    def test_bad_events_skipped(self, caplog):
        broken = make_scoreboard_event("E2")
        broken["competitions"][0]["status"] = {"type": "STATUS_FINAL"}
        scoreboard = {"events": [make_scoreboard_event("E1"), broken, "E3", {"id": "E4"}]}

        with caplog.at_level(logging.WARNING):
            games = extract_scoreboard_games(scoreboard)

        assert [g.game_id for g in games] == ["E1"]
        assert "Skipping scoreboard event #1" in caplog.text

    @pytest.mark.parametrize("payload", [{}, {"events": None}, []])
    def test_no_events(self, payload):
        assert extract_scoreboard_games(payload) == []
