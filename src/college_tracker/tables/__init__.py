"""
Static lookup tables.

Tables are immutable and passed explicitly into the builders:

    from college_tracker.tables import DEFAULT_CLASSIFICATION, DEFAULT_POSITIONS

    DEFAULT_CLASSIFICATION.classify("Texas A&M")   # "SEC"
    DEFAULT_POSITIONS.group_for("olb")             # "LB"
"""

from .conferences import (
    COLLEGE_TO_CONFERENCE,
    CONFERENCE_DISPLAY_ORDER,
    DEFAULT_CLASSIFICATION,
    FALLBACK_CONFERENCE,
    SLUG_OVERRIDES,
    ClassificationTable,
    college_slug,
    normalize_college_name,
)
from .positions import DEFAULT_POSITIONS, OTHER_GROUP, POSITION_GROUPS, PositionTable

__all__ = [
    "COLLEGE_TO_CONFERENCE",
    "CONFERENCE_DISPLAY_ORDER",
    "ClassificationTable",
    "DEFAULT_CLASSIFICATION",
    "DEFAULT_POSITIONS",
    "FALLBACK_CONFERENCE",
    "OTHER_GROUP",
    "POSITION_GROUPS",
    "PositionTable",
    "SLUG_OVERRIDES",
    "college_slug",
    "normalize_college_name",
]
