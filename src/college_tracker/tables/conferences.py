"""
College classification table.

Maps a college display name (exactly as the roster provider spells it) to its
conference, and derives the URL slug used for the college's aggregate
document. Names are matched after trimming; anything not listed here falls
back to ``FCS / Other``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from ..core.types import UNKNOWN_COLLEGE, UNKNOWN_SLUG

FALLBACK_CONFERENCE = "FCS / Other"

# =============================================================================
# FBS membership, 2025 season
# =============================================================================

_ACC = (
    "Boston College", "California", "Clemson", "Duke", "Florida State",
    "Georgia Tech", "Louisville", "Miami (FL)", "North Carolina", "NC State",
    "Pittsburgh", "SMU", "Stanford", "Syracuse", "Virginia", "Virginia Tech",
    "Wake Forest",
)

_BIG_TEN = (
    "Illinois", "Indiana", "Iowa", "Maryland", "Michigan", "Michigan State",
    "Minnesota", "Nebraska", "Northwestern", "Ohio State", "Oregon",
    "Penn State", "Purdue", "Rutgers", "UCLA", "USC", "Washington", "Wisconsin",
)

_BIG_12 = (
    "Arizona", "Arizona State", "Baylor", "BYU", "Cincinnati", "Colorado",
    "Houston", "Iowa State", "Kansas", "Kansas State", "Oklahoma State", "TCU",
    "Texas Tech", "UCF", "Utah", "West Virginia",
)

_SEC = (
    "Alabama", "Arkansas", "Auburn", "Florida", "Georgia", "Kentucky", "LSU",
    "Mississippi State", "Missouri", "Oklahoma", "Ole Miss", "South Carolina",
    "Tennessee", "Texas", "Texas A&M", "Vanderbilt",
)

_AAC = (
    "Army", "Charlotte", "East Carolina", "Florida Atlantic", "Memphis", "Navy",
    "North Texas", "Rice", "South Florida", "Temple", "Tulane", "Tulsa", "UTSA",
    "UAB",
)

_CUSA = (
    "FIU", "Jacksonville State", "Kennesaw State", "Liberty", "Louisiana Tech",
    "Middle Tennessee", "New Mexico State", "Sam Houston", "UTEP",
    "Western Kentucky", "Delaware", "Missouri State",
)

_MAC = (
    "Akron", "Ball State", "Bowling Green", "Buffalo", "Central Michigan",
    "Eastern Michigan", "Kent State", "Miami (OH)", "Northern Illinois", "Ohio",
    "Toledo", "Western Michigan",
)

_MOUNTAIN_WEST = (
    "Air Force", "Boise State", "Colorado State", "Fresno State",
    "Hawai’i", "Nevada", "New Mexico", "San Diego State",
    "San José State", "UNLV", "Utah State", "Wyoming",
)

_SUN_BELT = (
    "Appalachian State", "Arkansas State", "Coastal Carolina",
    "Georgia Southern", "Georgia State", "James Madison", "Louisiana",
    "Marshall", "Old Dominion", "South Alabama", "Southern Miss", "Texas State",
    "Troy", "ULM",
)

_INDEPENDENT = ("UConn", "UMass", "Notre Dame")


def _membership(**conferences: tuple[str, ...]) -> dict[str, str]:
    table: dict[str, str] = {}
    for conference, members in conferences.items():
        for college in members:
            table[college] = conference
    return table


COLLEGE_TO_CONFERENCE: Mapping[str, str] = MappingProxyType(
    _membership(
        **{
            "ACC": _ACC,
            "Big Ten": _BIG_TEN,
            "Big 12": _BIG_12,
            "SEC": _SEC,
            "AAC": _AAC,
            "C-USA": _CUSA,
            "MAC": _MAC,
            "Mountain West": _MOUNTAIN_WEST,
            "Sun Belt": _SUN_BELT,
            "Independent": _INDEPENDENT,
        }
    )
)

# Legacy short slugs kept so existing college URLs keep resolving.
SLUG_OVERRIDES: Mapping[str, str] = MappingProxyType({"Alabama": "ala", "BYU": "byu"})

# Homepage order: Power 4, Group of 5, independents, then everything else.
CONFERENCE_DISPLAY_ORDER: tuple[str, ...] = (
    "SEC",
    "Big Ten",
    "Big 12",
    "ACC",
    "AAC",
    "Mountain West",
    "Sun Belt",
    "MAC",
    "C-USA",
    "Independent",
    FALLBACK_CONFERENCE,
)


# =============================================================================
# Slugs
# =============================================================================

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def normalize_college_name(name: Optional[str]) -> str:
    """Trimmed display name, ``Unknown`` when missing or blank."""
    cleaned = (name or "").strip()
    return cleaned or UNKNOWN_COLLEGE


def college_slug(
    name: Optional[str],
    overrides: Mapping[str, str] = SLUG_OVERRIDES,
) -> str:
    """
    Derive the URL slug for a college.

    Examples:
        "Texas A&M" -> "texas-aandm", "Miami (FL)" -> "miami-fl", "BYU" -> "byu"

    Args:
        name: College display name (may be None or blank)
        overrides: Exact-name slug overrides, checked before derivation

    Returns:
        Non-empty lowercase slug; ``unknown`` when nothing usable remains
    """
    cleaned = normalize_college_name(name)

    override = overrides.get(cleaned)
    if override:
        return override

    slug = cleaned.lower().replace("&", "and")
    slug = _NON_SLUG_CHARS.sub("-", slug).strip("-")
    return slug or UNKNOWN_SLUG


# =============================================================================
# Classification
# =============================================================================


@dataclass(frozen=True)
class ClassificationTable:
    """
    Static college -> conference lookup handed to the aggregation builders.

    Build a custom table in tests instead of patching module globals.
    """

    conferences: Mapping[str, str] = field(default_factory=lambda: COLLEGE_TO_CONFERENCE)
    slug_overrides: Mapping[str, str] = field(default_factory=lambda: SLUG_OVERRIDES)
    display_order: tuple[str, ...] = CONFERENCE_DISPLAY_ORDER
    fallback: str = FALLBACK_CONFERENCE

    def classify(self, college: Optional[str]) -> str:
        """Conference for a college name, or the fallback label."""
        return self.conferences.get(normalize_college_name(college), self.fallback)

    def slug_for(self, college: Optional[str]) -> str:
        return college_slug(college, self.slug_overrides)

    def group_rank(self, group: str) -> tuple[int, str]:
        """Sort key placing listed groups first, in display order, then the rest alphabetically."""
        try:
            return (self.display_order.index(group), "")
        except ValueError:
            return (len(self.display_order), group)


DEFAULT_CLASSIFICATION = ClassificationTable()
