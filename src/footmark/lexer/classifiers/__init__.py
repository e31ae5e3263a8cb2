"""Block-level classifiers for the footmark lexer.

Each classifier is a mixin providing pure classification logic for one
block construct. Classifiers look at a line and the index where its
content starts; they never move the lexer's position. They return a small
match record describing where the construct's parts are, or None.
"""

from footmark.lexer.classifiers.fence import FenceClassifierMixin, FenceMatch
from footmark.lexer.classifiers.footnote import (
    FootnoteClassifierMixin,
    FootnoteDefinitionMatch,
    scan_label,
)
from footmark.lexer.classifiers.heading import HeadingClassifierMixin, HeadingMatch
from footmark.lexer.classifiers.list import ListClassifierMixin, ListMarkerMatch
from footmark.lexer.classifiers.thematic import ThematicClassifierMixin

__all__ = [
    "FenceClassifierMixin",
    "FenceMatch",
    "FootnoteClassifierMixin",
    "FootnoteDefinitionMatch",
    "HeadingClassifierMixin",
    "HeadingMatch",
    "ListClassifierMixin",
    "ListMarkerMatch",
    "ThematicClassifierMixin",
    "scan_label",
]
