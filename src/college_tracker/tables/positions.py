"""
Position group table.

Collapses the provider's raw position codes into nine coarse groups used by
the homepage position leaders and the position drilldown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

OTHER_GROUP = "Other"

POSITION_GROUPS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "QB": ("QB",),
        "RB": ("RB", "HB", "FB"),
        "WR": ("WR",),
        "TE": ("TE",),
        "OL": ("C", "G", "OG", "OT", "T", "LT", "RT", "OL"),
        "DL": ("DE", "DT", "DL", "NT", "EDGE"),
        "LB": ("LB", "ILB", "OLB", "MLB"),
        "DB": ("DB", "CB", "S", "FS", "SS", "NB", "SAF"),
        "ST": ("K", "P", "PK", "LS"),
    }
)


def _invert(groups: Mapping[str, tuple[str, ...]]) -> dict[str, str]:
    aliases: dict[str, str] = {}
    for group, codes in groups.items():
        for code in codes:
            if code in aliases:
                raise ValueError(f"Position code {code!r} listed in {aliases[code]} and {group}")
            aliases[code] = group
    return aliases


@dataclass(frozen=True)
class PositionTable:
    """Closed alias table: raw position code -> position group."""

    groups: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: POSITION_GROUPS)
    other: str = OTHER_GROUP
    aliases: Mapping[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "aliases", MappingProxyType(_invert(self.groups)))

    @property
    def group_names(self) -> tuple[str, ...]:
        return tuple(self.groups)

    def group_for(self, position: Optional[str]) -> Optional[str]:
        """
        Map a raw position code to its group.

        Codes are upper-cased and trimmed first. Unlisted codes map to
        ``Other``; a missing or blank position returns None.
        """
        if position is None:
            return None
        code = str(position).strip().upper()
        if not code:
            return None
        return self.aliases.get(code, self.other)


DEFAULT_POSITIONS = PositionTable()
