"""Footnote support: parse and serialize ``[^label]`` calls and definitions.

Two halves, used together or on their own:
- footnote_from_markdown(): builds FootnoteReference and
  FootnoteDefinition nodes from lexer events
- footnote_to_markdown(): writes them back, escaping text that would
  otherwise read as footnote syntax

Usage:
    >>> from footmark import parse, to_markdown
    >>> doc = parse("Hi[^1].\\n\\n[^1]: Note.")
    >>> to_markdown(doc)
    'Hi[^1].\\n\\n[^1]: Note.\\n'

"""

from footmark.footnotes.from_markdown import footnote_from_markdown
from footmark.footnotes.to_markdown import FOOTNOTE_UNSAFE, footnote_to_markdown

__all__ = ["FOOTNOTE_UNSAFE", "footnote_from_markdown", "footnote_to_markdown"]
