#!/usr/bin/env python3
"""
Command-line interface for the college tracker data pipeline.

Usage:
    college-tracker seed-roster                 # Rebuild allPlayers.json from ESPN rosters
    college-tracker seed-players                # Create empty players/<id>.json documents
    college-tracker update 401772510 401772830  # Merge games into player documents
    college-tracker update --games-file data/gameIds.txt
    college-tracker update --scoreboard         # Every started or finished game this week
    college-tracker update-all --live           # Only games in progress; no-op when none are
    college-tracker aggregate                   # Rebuild aggregates/ and indices/
    college-tracker summary                     # Rebuild homeSummary.json
    college-tracker update-all --games-file data/gameIds.txt
    college-tracker status
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .core.config import Settings, get_settings
from .pipeline import Pipeline, load_game_ids
from .providers.base import ProviderError
from .store.files import StoreError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("college_tracker.cli")


def get_pipeline(args: argparse.Namespace) -> Pipeline:
    """Build a pipeline from settings, applying CLI overrides."""
    settings = get_settings()
    overrides = {}
    if getattr(args, "data_dir", None):
        overrides["data_dir"] = Path(args.data_dir)
    if getattr(args, "batch_size", None):
        overrides["batch_size"] = args.batch_size
    if overrides:
        settings = settings.model_copy(update=overrides)
    return Pipeline(settings)


def resolve_game_ids(args: argparse.Namespace, settings: Settings) -> list[str]:
    """Game ids from positional args, then --games-file, then settings.game_ids_file."""
    if args.game_ids:
        return [str(g) for g in args.game_ids]
    games_file = args.games_file or settings.game_ids_file
    if games_file is None:
        return []
    return load_game_ids(Path(games_file))


async def discover_game_ids(args: argparse.Namespace, pipeline: Pipeline) -> list[str]:
    """Game ids from the provider scoreboard when --scoreboard/--live is set, else resolve_game_ids()."""
    if args.live or args.scoreboard:
        return await pipeline.scoreboard_game_ids(live_only=args.live, dates=args.dates)
    return resolve_game_ids(args, pipeline.settings)


# =============================================================================
# Commands
# =============================================================================


async def cmd_seed_roster_async(args: argparse.Namespace) -> int:
    """Rebuild the roster snapshot from the provider."""
    async with get_pipeline(args) as pipeline:
        try:
            result = await pipeline.seed_roster()
        except ProviderError as e:
            logger.error("Roster seeding failed: %s", e)
            return 1

    logger.info(
        "Roster snapshot: %d players from %d teams (%d failed)",
        result.players,
        result.teams,
        len(result.failed_teams),
    )
    return 0


def cmd_seed_roster(args: argparse.Namespace) -> int:
    """Wrapper to run async seed-roster command."""
    return asyncio.run(cmd_seed_roster_async(args))


def cmd_seed_players(args: argparse.Namespace) -> int:
    """Create empty player documents for the roster snapshot."""
    pipeline = get_pipeline(args)
    try:
        result = pipeline.seed_players()
    except StoreError as e:
        logger.error("Player seeding failed: %s", e)
        return 1

    logger.info("Created %d player documents, %d already existed", result.created, result.existing)
    return 0


async def cmd_update_async(args: argparse.Namespace) -> int:
    """Merge games into player documents."""
    async with get_pipeline(args) as pipeline:
        try:
            game_ids = await discover_game_ids(args, pipeline)
            if not game_ids and args.live:
                logger.info("No games in progress; skipping update")
                return 0
            if not game_ids:
                logger.error(
                    "No game ids given (pass ids, --games-file, --scoreboard, or set COLLEGE_TRACKER_GAME_IDS_FILE)"
                )
                return 1
            result = await pipeline.update_games(game_ids)
        except (ProviderError, StoreError, OSError) as e:
            logger.error("Update failed: %s", e)
            return 1

    logger.info(
        "Updated %d players across %d/%d games",
        result.players_updated,
        result.games_updated,
        result.games_requested,
    )
    if result.failed_games:
        logger.warning("Failed games: %s", ", ".join(result.failed_games))
    return 0


def cmd_update(args: argparse.Namespace) -> int:
    """Wrapper to run async update command."""
    return asyncio.run(cmd_update_async(args))


def cmd_aggregate(args: argparse.Namespace) -> int:
    """Rebuild per-college aggregates."""
    pipeline = get_pipeline(args)
    try:
        result = pipeline.aggregate()
    except StoreError as e:
        logger.error("Aggregation failed: %s", e)
        return 1

    logger.info("Wrote %d aggregates, removed %d stale", result.aggregates_written, len(result.stale_removed))
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Rebuild the home summary."""
    pipeline = get_pipeline(args)
    try:
        summary = pipeline.build_summary()
    except OSError as e:
        logger.error("Summary build failed: %s", e)
        return 1

    logger.info("Home summary written for week %s", summary.week)
    return 0


async def cmd_update_all_async(args: argparse.Namespace) -> int:
    """Merge games, then rebuild aggregates and the summary."""
    async with get_pipeline(args) as pipeline:
        try:
            game_ids = await discover_game_ids(args, pipeline)
            if not game_ids and args.live:
                logger.info("No games in progress; skipping update")
                return 0
            result = await pipeline.run_update(game_ids)
        except (ProviderError, StoreError, OSError) as e:
            logger.error("Update failed: %s", e)
            return 1

    logger.info(
        "Run complete: %d games, %d players, %d aggregates",
        result.meta.games_updated,
        result.meta.players_updated,
        result.meta.aggregates_written,
    )
    return 0


def cmd_update_all(args: argparse.Namespace) -> int:
    """Wrapper to run async update-all command."""
    return asyncio.run(cmd_update_all_async(args))


def cmd_status(args: argparse.Namespace) -> int:
    """Show data directory status."""
    pipeline = get_pipeline(args)
    settings = pipeline.settings

    roster_count = None
    if pipeline.roster_store.exists():
        try:
            roster_count = len(pipeline.roster_store.load())
        except StoreError as e:
            logger.error("Roster snapshot unreadable: %s", e)

    players = len(list(settings.players_dir.glob("*.json"))) if settings.players_dir.is_dir() else 0
    aggregates = len(pipeline.documents.aggregate_paths())
    meta = pipeline.documents.read_run_meta()

    print("\nCollege Tracker Data Status")
    print("=" * 50)
    print(f"Data directory: {settings.data_dir}")
    print(f"Roster entries: {roster_count if roster_count is not None else 'missing'}")
    print(f"Player documents: {players:,}")
    print(f"College aggregates: {aggregates:,}")
    print(f"Home summary: {'present' if settings.summary_path.exists() else 'missing'}")
    if meta is None:
        print("Last successful run: Never")
    else:
        print(f"Last successful run: {meta.last_successful_run.isoformat()}")
        print(f"  Games updated: {meta.games_updated}/{meta.games_requested}")
        print(f"  Players updated: {meta.players_updated}")
        if meta.failed_games:
            print(f"  Failed games: {', '.join(meta.failed_games)}")

    return 0 if roster_count is not None else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="college-tracker",
        description="College Tracker data pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data-dir", help="Override COLLEGE_TRACKER_DATA_DIR")
    parser.add_argument("--batch-size", type=int, help="Concurrent provider fetches per batch")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("seed-roster", help="Rebuild allPlayers.json from ESPN team rosters")
    subparsers.add_parser("seed-players", help="Create empty player documents for the roster")

    for name, help_text in (
        ("update", "Merge box scores for the given games into player documents"),
        ("update-all", "Merge games, rebuild aggregates and the home summary"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("game_ids", nargs="*", help="ESPN game ids")
        sub.add_argument("--games-file", help="Text file with one game id per line")
        source = sub.add_mutually_exclusive_group()
        source.add_argument(
            "--scoreboard",
            action="store_true",
            help="Take game ids from the ESPN scoreboard (started or finished games)",
        )
        source.add_argument(
            "--live",
            action="store_true",
            help="Take only in-progress games from the ESPN scoreboard",
        )
        sub.add_argument("--dates", help="Scoreboard date filter, YYYYMMDD (default: current week)")

    subparsers.add_parser("aggregate", help="Rebuild per-college aggregates and indices")
    subparsers.add_parser("summary", help="Rebuild homeSummary.json")
    subparsers.add_parser("status", help="Show data directory status")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.getLogger().setLevel(get_settings().log_level.upper())

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "seed-roster": cmd_seed_roster,
        "seed-players": cmd_seed_players,
        "update": cmd_update,
        "aggregate": cmd_aggregate,
        "summary": cmd_summary,
        "update-all": cmd_update_all,
        "status": cmd_status,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
