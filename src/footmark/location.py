"""Source positions for parsed nodes.

Provides SourceLocation, the span a parsed node covers in its source text.
Nodes built by hand carry no location at all.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Point(NamedTuple):
    """One place in the source: 1-indexed line and column, 0-indexed offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Start and end of a node in its source.

    Lines and columns are 1-indexed; offsets are 0-indexed positions in the
    source string. The end is exclusive: a one-character node at offset 5
    ends at offset 6.

    Attributes:
        lineno: Starting line number
        col_offset: Starting column
        offset: Absolute start offset
        end_lineno: Ending line number
        end_col_offset: Ending column
        end_offset: Absolute end offset
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(1, 7, 6, 2, 2, 9)
            >>> str(loc)
            '1:7-2:2'
            >>> loc.end
            Point(line=2, column=2, offset=9)

    """

    lineno: int
    col_offset: int
    offset: int
    end_lineno: int
    end_col_offset: int
    end_offset: int
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages, e.g. ``notes.md:1:7-2:2``."""
        span = f"{self.lineno}:{self.col_offset}-{self.end_lineno}:{self.end_col_offset}"
        if self.source_file:
            return f"{self.source_file}:{span}"
        return span

    @property
    def start(self) -> Point:
        return Point(self.lineno, self.col_offset, self.offset)

    @property
    def end(self) -> Point:
        return Point(self.end_lineno, self.end_col_offset, self.end_offset)

    @classmethod
    def between(cls, start: Point, end: Point, source_file: str | None = None) -> SourceLocation:
        """Create a location from two points."""
        return cls(
            lineno=start.line,
            col_offset=start.column,
            offset=start.offset,
            end_lineno=end.line,
            end_col_offset=end.column,
            end_offset=end.offset,
            source_file=source_file,
        )

    def span_to(self, end: SourceLocation) -> SourceLocation:
        """Create a new location from this start to the end of ``end``."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col_offset,
            offset=self.offset,
            end_lineno=end.end_lineno,
            end_col_offset=end.end_col_offset,
            end_offset=end.end_offset,
            source_file=self.source_file,
        )
