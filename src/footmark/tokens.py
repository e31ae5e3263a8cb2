"""Token and event definitions for the footmark lexer.

The lexer produces a stream of enter/exit events that the tree builder
consumes. Each event wraps a Token: a type, a string value, and the span
of source the token covers.

Thread Safety:
Token and Event are frozen (immutable) and safe to share across threads.

Performance Note:
Token stores raw coordinates and lazily creates SourceLocation on demand.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from footmark.location import Point

if TYPE_CHECKING:
    from footmark.location import SourceLocation


class TokenType(Enum):
    """Token types produced by the lexer.

    Every type is emitted as an ENTER/EXIT pair; leaf types (text, code
    spans, label strings) carry their content in ``value``.

    """

    # Document structure
    DOCUMENT = auto()

    # Leaf blocks
    PARAGRAPH = auto()
    HEADING = auto()  # value: level ("1".."6")
    FENCED_CODE = auto()  # enter value: info string; exit value: code
    INDENTED_CODE = auto()  # exit value: code
    THEMATIC_BREAK = auto()

    # Containers
    LIST = auto()  # exit value: "tight" or "loose"
    LIST_ITEM = auto()

    # Inline
    TEXT = auto()  # value: text with escapes resolved
    CODE_SPAN = auto()  # value: code

    # Footnotes
    FOOTNOTE_DEFINITION = auto()  # [^label]: ...
    FOOTNOTE_DEFINITION_LABEL_STRING = auto()  # value: raw label source
    FOOTNOTE_CALL = auto()  # [^label]
    FOOTNOTE_CALL_STRING = auto()  # value: raw label source


class EventKind(Enum):
    """Whether an event opens or closes its token."""

    ENTER = auto()
    EXIT = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A span of source recognized by the lexer.

    Attributes:
        type: The token type (from TokenType enum)
        value: Payload string (meaning depends on the type)
        _lineno: Start line number (1-indexed)
        _col: Start column (1-indexed)
        _start_offset: Absolute start position in source
        _end_lineno: End line number
        _end_col: End column
        _end_offset: Absolute end position in source (exclusive)
        _source_file: Optional source file path

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.
        The lazy cache uses idempotent write (safe for concurrent access).

    """

    type: TokenType
    value: str
    _lineno: int
    _col: int
    _start_offset: int
    _end_lineno: int
    _end_col: int
    _end_offset: int
    _source_file: str | None = None
    # Cache field - excluded from repr and comparison
    _location_cache: SourceLocation | None = field(
        default=None, repr=False, compare=False, hash=False
    )

    @classmethod
    def spanning(
        cls,
        token_type: TokenType,
        value: str,
        start: Point,
        end: Point,
        source_file: str | None = None,
    ) -> Token:
        """Create a token covering ``start`` up to ``end``."""
        return cls(
            type=token_type,
            value=value,
            _lineno=start.line,
            _col=start.column,
            _start_offset=start.offset,
            _end_lineno=end.line,
            _end_col=end.column,
            _end_offset=end.offset,
            _source_file=source_file,
        )

    @property
    def location(self) -> SourceLocation:
        """Get source location (lazily created and cached)."""
        if self._location_cache is not None:
            return self._location_cache

        from footmark.location import SourceLocation

        loc = SourceLocation(
            lineno=self._lineno,
            col_offset=self._col,
            offset=self._start_offset,
            end_lineno=self._end_lineno,
            end_col_offset=self._end_col,
            end_offset=self._end_offset,
            source_file=self._source_file,
        )
        # Safe mutation of frozen dataclass cache field (idempotent write)
        object.__setattr__(self, "_location_cache", loc)
        return loc

    @property
    def start(self) -> Point:
        return Point(self._lineno, self._col, self._start_offset)

    @property
    def end(self) -> Point:
        return Point(self._end_lineno, self._end_col, self._end_offset)

    @property
    def lineno(self) -> int:
        """Line number (convenience accessor)."""
        return self._lineno

    @property
    def col(self) -> int:
        """Column (convenience accessor)."""
        return self._col

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self._lineno}:{self._col})"


@dataclass(frozen=True, slots=True)
class Event:
    """An ENTER or EXIT of a token, in document order."""

    kind: EventKind
    token: Token

    def __repr__(self) -> str:
        return f"Event({self.kind.name}, {self.token!r})"


def enter(token: Token) -> Event:
    return Event(EventKind.ENTER, token)


def exit_(token: Token) -> Event:
    return Event(EventKind.EXIT, token)
