"""
Finds a literal on a line, tolerating small horizontal drift.
"""

from typing import Optional

from ..config import SEARCH_RADIUS


class TextLocator:
    @staticmethod
    def match_at(expected: str, line: str, col: int) -> bool:
        """True if line holds expected starting at 0-indexed col."""
        if col < 0 or col + len(expected) > len(line):
            return False
        return line[col:col + len(expected)] == expected

    @staticmethod
    def find_expected_text(expected: str, line: str, hint_col: int,
                           radius: int = SEARCH_RADIUS) -> Optional[int]:
        """
        Locate expected in line near hint_col (0-indexed).

        The exact column is tried first, then offsets +1, -1, +2, -2, ... up to
        radius. Returns the 0-indexed column of the first match, or None.
        """
        if not expected or len(expected) > len(line):
            return None

        if TextLocator.match_at(expected, line, hint_col):
            return hint_col

        for offset in range(1, radius + 1):
            if TextLocator.match_at(expected, line, hint_col + offset):
                return hint_col + offset
            if TextLocator.match_at(expected, line, hint_col - offset):
                return hint_col - offset
        return None

    @staticmethod
    def safe_substring(line: str, col: int, length: int) -> str:
        """Text at col for diagnostics; 'out of bounds' if col is off the line."""
        if col < 0 or col >= len(line):
            return "out of bounds"
        return line[col:col + length]
