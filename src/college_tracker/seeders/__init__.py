"""
Seeders: move provider data into the data directory.

    RosterSeeder          teams + rosters  -> allPlayers.json
    seed_player_documents allPlayers.json  -> empty players/<id>.json
    BoxscoreSeeder        box scores       -> players/<id>.json game logs
"""

from .boxscores import BoxscoreSeeder, GameUpdateResult, index_roster
from .roster import PlayerSeedResult, RosterSeeder, RosterSeedResult, seed_player_documents
from .utils import run_parallel_batches

__all__ = [
    "BoxscoreSeeder",
    "GameUpdateResult",
    "PlayerSeedResult",
    "RosterSeedResult",
    "RosterSeeder",
    "index_roster",
    "run_parallel_batches",
    "seed_player_documents",
]
