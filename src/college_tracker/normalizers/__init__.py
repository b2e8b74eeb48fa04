"""
Box-score normalization.

Turns one provider game package into the canonical records the player store
merges:

    meta = extract_game_meta(package)
    per_player = normalize_player_stats(package["boxscore"]["players"])
"""

from .game_meta import extract_game_meta, parse_game_date, resolve_status
from .parsers import StatParsers, parse_made_attempts, to_float, to_int
from .scoring import SCORING_WEIGHTS, production_score
from .stats import PlayerGameStats, empty_bundle, normalize_player_stats

__all__ = [
    "PlayerGameStats",
    "SCORING_WEIGHTS",
    "StatParsers",
    "empty_bundle",
    "extract_game_meta",
    "normalize_player_stats",
    "parse_game_date",
    "parse_made_attempts",
    "production_score",
    "resolve_status",
    "to_float",
    "to_int",
]
