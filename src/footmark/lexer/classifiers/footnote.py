"""Footnote label scanning and definition classifier mixin.

Footnote syntax:
    Call:        [^label]
    Definition:  [^label]: content

A label runs from after ``[^`` to the first unescaped ``]``. It may not
contain a line ending or an unescaped ``[``, must have some
non-whitespace, and is at most ``max_length`` characters long.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from footmark.identifiers import normalize_identifier, unescape_label

logger = logging.getLogger(__name__)

# Characters a backslash escapes inside a label
_LABEL_ESCAPABLE = frozenset("[\\]")


def scan_label(text: str, start: int, max_length: int) -> int | None:
    """Find the ``]`` closing a footnote label that starts at ``start``.

    Args:
        text: Text containing the label
        start: Index of the first label character (just after ``[^``)
        max_length: Longest accepted label

    Returns:
        Index of the closing ``]``, or None if there is no valid label.

    """
    pos = start
    text_len = len(text)
    while pos < text_len:
        char = text[pos]
        if char == "]":
            if pos == start:
                return None
            if not normalize_identifier(unescape_label(text[start:pos])):
                logger.debug("Rejected whitespace-only footnote label at index %d", start)
                return None
            return pos
        if char in "[\n\r":
            return None
        if char == "\\" and pos + 1 < text_len and text[pos + 1] in _LABEL_ESCAPABLE:
            pos += 2
        else:
            pos += 1
        if pos - start > max_length:
            logger.debug("Rejected footnote label longer than %d characters", max_length)
            return None
    return None


@dataclass(frozen=True, slots=True)
class FootnoteDefinitionMatch:
    """A footnote definition marker ``[^label]:``.

    Attributes:
        label_start: Index of the first label character
        label_end: Index of the closing ``]``
        marker_end: Index just past the ``:``

    """

    label_start: int
    label_end: int
    marker_end: int


class FootnoteClassifierMixin:
    """Mixin providing footnote definition classification."""

    _max_label_length: int

    def _try_classify_footnote_def(self, text: str, index: int) -> FootnoteDefinitionMatch | None:
        """Try to classify ``text[index:]`` as a footnote definition marker.

        Format: [^label]: content

        Returns:
            Match with label and marker positions if valid, None otherwise.
        """
        if not text.startswith("[^", index):
            return None

        label_end = scan_label(text, index + 2, self._max_label_length)
        if label_end is None:
            return None
        if not text.startswith(":", label_end + 1):
            return None

        return FootnoteDefinitionMatch(
            label_start=index + 2,
            label_end=label_end,
            marker_end=label_end + 2,
        )
