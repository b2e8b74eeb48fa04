"""
Tests for the derived-document store read side.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import pytest

from college_tracker.core.models import CollegeAggregate, PlayerSummary, RunMeta
from college_tracker.store.documents import DocumentNotFoundError


def _college(college, slug, positions):
    return CollegeAggregate(
        college=college,
        slug=slug,
        conference="SEC",
        group="SEC",
        players=[PlayerSummary(id=f"{slug}-{i}", position=pos) for i, pos in enumerate(positions)],
    )


class TestReadCollege:
    def test_case_insensitive(self, documents):
        documents.write_aggregate(_college("Alabama", "ala", ["QB"]))

        assert documents.read_college("ALA").college == "Alabama"
        assert documents.read_college(" ala ").players[0].id == "ala-0"

    @pytest.mark.parametrize("slug", ["nowhere", "", "../ala"])
    def test_missing_or_invalid(self, documents, slug):
        with pytest.raises(DocumentNotFoundError):
            documents.read_college(slug)

    def test_slug_filled_from_filename(self, documents):
        path = documents.aggregate_path("lsu")
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"college": "LSU", "conference": "SEC", "group": "SEC", "players": []}))

        assert documents.read_college("lsu").slug == "lsu"

    def test_unreadable_aggregate(self, documents, caplog):
        path = documents.aggregate_path("lsu")
        path.parent.mkdir(parents=True)
        path.write_text("[")

        with caplog.at_level(logging.ERROR), pytest.raises(DocumentNotFoundError):
            documents.read_college("lsu")
        assert "unreadable" in caplog.text

    def test_read_aggregates_skips_bad_files(self, documents):
        documents.write_aggregate(_college("Alabama", "ala", ["QB"]))
        documents.aggregate_path("bad").write_text("{}")

        assert [a.slug for a in documents.read_aggregates()] == ["ala"]


class TestPositionDrilldown:
    def test_alphabetical_colleges_with_matching_players(self, documents):
        documents.write_aggregate(_college("Texas", "texas", ["CB", "QB"]))
        documents.write_aggregate(_college("Alabama", "ala", ["S", "FS", "WR"]))
        documents.write_aggregate(_college("Iowa", "iowa", ["TE"]))

        drilldown = documents.colleges_for_position_group("db")

        assert drilldown.group == "DB"
        assert [c.college for c in drilldown.colleges] == ["Alabama", "Texas"]
        assert [p.id for p in drilldown.colleges[0].players] == ["ala-0", "ala-1"]
        assert [p.position for p in drilldown.colleges[1].players] == ["CB"]

    def test_other_group(self, documents):
        documents.write_aggregate(_college("Iowa", "iowa", ["UNK", "QB"]))
        drilldown = documents.colleges_for_position_group("Other")
        assert [p.id for p in drilldown.colleges[0].players] == ["iowa-0"]

    def test_no_aggregates(self, documents):
        assert documents.colleges_for_position_group("QB").colleges == []


class TestSummaryAndMeta:
    def test_home_summary_missing(self, documents):
        with pytest.raises(DocumentNotFoundError):
            documents.read_home_summary()

    def test_players_by_college_missing(self, documents):
        with pytest.raises(DocumentNotFoundError):
            documents.read_players_by_college()

    def test_run_meta_round_trip(self, documents):
        assert documents.read_run_meta() is None

        meta = RunMeta(
            last_successful_run=datetime(2025, 12, 8, 6, 0, tzinfo=timezone.utc),
            games_requested=2,
            games_updated=1,
            failed_games=["G2"],
        )
        documents.write_run_meta(meta)

        assert documents.read_run_meta() == meta
        doc = json.loads(documents.meta_path.read_text())
        assert doc["failedGames"] == ["G2"]
        assert "lastSuccessfulRun" in doc

    def test_unreadable_run_meta_is_none(self, documents):
        documents.meta_path.parent.mkdir(parents=True, exist_ok=True)
        documents.meta_path.write_text("not json")
        assert documents.read_run_meta() is None
