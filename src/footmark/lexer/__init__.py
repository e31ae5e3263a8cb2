"""Line-oriented lexer for footmark.

The lexer scans the source line by line, tracks open containers, buffers
each leaf block until it closes and emits a flat stream of enter/exit
events in document order.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, InlineScanner
├── core.py              # Lexer class (mixin composition + line dispatch)
├── containers.py        # Container stack (definitions, lists, items)
├── inline.py            # Inline scanner (text, code spans, footnote calls)
└── classifiers/         # Block-type classification mixins
    ├── heading.py       # ATX heading
    ├── fence.py         # Fenced code
    ├── thematic.py      # Thematic break
    ├── list.py          # Bullet list markers
    └── footnote.py      # Footnote labels and definitions

Usage:
    >>> from footmark.lexer import Lexer
    >>> for event in Lexer("Hello").tokenize():
    ...     print(event)
Event(ENTER, Token(DOCUMENT, '', 1:1))
Event(ENTER, Token(PARAGRAPH, '', 1:1))
Event(ENTER, Token(TEXT, 'Hello', 1:1))
Event(EXIT, Token(TEXT, 'Hello', 1:1))
Event(EXIT, Token(PARAGRAPH, '', 1:1))
Event(EXIT, Token(DOCUMENT, '', 1:1))

"""

from footmark.lexer.core import Lexer
from footmark.lexer.inline import InlineScanner

__all__ = ["InlineScanner", "Lexer"]
