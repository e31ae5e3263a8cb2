"""Thematic break classifier mixin."""

from __future__ import annotations


class ThematicClassifierMixin:
    """Mixin providing thematic break classification."""

    def _is_thematic_break(self, text: str, index: int) -> bool:
        """Check whether ``text[index:]`` is a thematic break.

        Thematic breaks are 3+ of the same character (-, *, _) with
        optional spaces/tabs between them.
        """
        if index >= len(text) or text[index] not in "-*_":
            return False

        char = text[index]
        count = 0
        for c in text[index:]:
            if c == char:
                count += 1
            elif c not in " \t":
                return False
        return count >= 3
