"""
Tolerant value parsers for provider stat strings.

ESPN reports every box-score value as a string ("127", "0", "13/21", "1.5",
"--"). These helpers never raise: anything that cannot be read becomes 0.
"""

from __future__ import annotations

import math
import re
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


class StatParsers:
    """Shared parsing utilities for provider stat values."""

    @staticmethod
    def to_int(value: Any) -> int:
        """Parse the leading integer of a value.

        Examples:
            "127" -> 127, "12.5" -> 12, "7yds" -> 7, "" -> 0, None -> 0, "--" -> 0

        Args:
            value: Raw provider value (usually a string)

        Returns:
            Parsed integer, or 0 if parsing fails
        """
        if value is None or isinstance(value, bool):
            return 0

        if isinstance(value, int):
            return value

        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return 0
            return int(value)

        if isinstance(value, str):
            match = _LEADING_INT.match(value)
            return int(match.group(1)) if match else 0

        return 0

    @staticmethod
    def to_float(value: Any) -> float:
        """Parse the leading decimal number of a value ("1.5" -> 1.5, "" -> 0.0)."""
        if value is None or isinstance(value, bool):
            return 0.0

        if isinstance(value, (int, float)):
            number = float(value)
            return 0.0 if math.isnan(number) or math.isinf(number) else number

        if isinstance(value, str):
            match = _LEADING_FLOAT.match(value)
            return float(match.group(1)) if match else 0.0

        return 0.0

    @staticmethod
    def parse_made_attempts(value: Any) -> tuple[int, int]:
        """Parse a "made/attempts" value such as "13/21".

        Anything other than a string with exactly one slash yields (0, 0):
        "", None, "abc" and "5" all parse to (0, 0).

        Returns:
            Tuple of (made, attempts)
        """
        if not value or not isinstance(value, str):
            return 0, 0

        parts = value.split("/")
        if len(parts) != 2:
            return 0, 0

        return StatParsers.to_int(parts[0]), StatParsers.to_int(parts[1])


to_int = StatParsers.to_int
to_float = StatParsers.to_float
parse_made_attempts = StatParsers.parse_made_attempts
