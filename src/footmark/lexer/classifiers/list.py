"""Bullet list marker classifier mixin."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ListMarkerMatch:
    """A bullet list item marker.

    Attributes:
        bullet: The marker character
        spaces: Columns of whitespace that belong to the marker (1-4)
        empty: Nothing follows the marker on this line

    """

    bullet: str
    spaces: int
    empty: bool


class ListClassifierMixin:
    """Mixin providing bullet list marker classification."""

    def _try_classify_list_marker(self, text: str, index: int, column: int) -> ListMarkerMatch | None:
        """Try to classify ``text[index:]`` as a bullet list marker.

        The marker must be followed by whitespace or the end of the line.
        Content starts 1-4 columns after the marker; with 5 or more, only
        one column belongs to the marker and the rest is indented code.

        Args:
            text: The full line
            index: Index of the candidate marker
            column: Visual column of ``text[index]``
        """
        if index >= len(text) or text[index] not in "-*+":
            return None
        rest = text[index + 1 :]
        if rest and rest[0] not in " \t":
            return None
        if not rest.strip(" \t"):
            return ListMarkerMatch(bullet=text[index], spaces=1, empty=True)

        spaces = 0
        col = column + 1
        for c in rest:
            if c == " ":
                width = 1
            elif c == "\t":
                width = 4 - (col % 4)
            else:
                break
            spaces += width
            col += width
        if spaces > 4:
            spaces = 1
        return ListMarkerMatch(bullet=text[index], spaces=spaces, empty=False)
