"""Line-oriented lexer producing enter/exit events.

Scans the source one line at a time:
1. Match the line against the open containers (footnote definitions,
   list items), consuming the indentation each one claims
2. Classify new container markers at the remaining position
3. Decide between lazy paragraph continuation, closing containers and
   starting or continuing a leaf block

Leaf blocks are buffered until they close, then emitted with their inline
content, so the event stream is always in document order and every token
carries its final span.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from footmark.config import get_parse_config
from footmark.lexer.classifiers import (
    FenceClassifierMixin,
    FenceMatch,
    FootnoteClassifierMixin,
    HeadingClassifierMixin,
    HeadingMatch,
    ListClassifierMixin,
    ThematicClassifierMixin,
)
from footmark.lexer.containers import ContainerFrame, ContainerStack, ContainerType
from footmark.lexer.inline import InlineScanner
from footmark.location import Point
from footmark.tokens import Event, Token, TokenType, enter, exit_


@dataclass(slots=True)
class Line:
    """One source line and a cursor over it.

    ``pos`` indexes the next unconsumed character; ``col`` is its visual
    column, with tabs advancing to the next multiple of 4.
    """

    text: str
    lineno: int
    start: int
    pos: int = 0
    col: int = 0

    def point(self, index: int) -> Point:
        return Point(self.lineno, index + 1, self.start + index)

    def scan_indent(self) -> tuple[int, int]:
        """Measure whitespace at the cursor without consuming it.

        Returns:
            (indent_columns, index_of_first_non_whitespace)
        """
        col = self.col
        pos = self.pos
        text = self.text
        while pos < len(text):
            char = text[pos]
            if char == " ":
                col += 1
            elif char == "\t":
                col += 4 - (col % 4)
            else:
                break
            pos += 1
        return col - self.col, pos

    def is_blank(self) -> bool:
        return not self.text[self.pos :].strip(" \t")

    def advance_to(self, index: int) -> None:
        col = self.col
        for char in self.text[self.pos : index]:
            col = col + 4 - (col % 4) if char == "\t" else col + 1
        self.pos = index
        self.col = col

    def advance_columns(self, columns: int) -> None:
        """Consume up to ``columns`` columns of whitespace."""
        target = self.col + columns
        while self.col < target and self.pos < len(self.text) and self.text[self.pos] in " \t":
            self.advance_to(self.pos + 1)

    @property
    def content_end(self) -> int:
        return len(self.text.rstrip(" \t"))


@dataclass(frozen=True, slots=True)
class _Opening:
    """A container marker found on the current line, not yet opened."""

    container_type: ContainerType
    start: Point
    end: Point
    content_indent: int
    bullet: str = ""
    label: Token | None = None


@dataclass(slots=True)
class _ParagraphLeaf:
    segments: list[tuple[str, Point]] = field(default_factory=list)
    end: Point | None = None

    def add(self, line: Line) -> None:
        _, first = line.scan_indent()
        last = line.content_end
        self.segments.append((line.text[first:last], line.point(first)))
        self.end = line.point(last)


@dataclass(slots=True)
class _FenceLeaf:
    match: FenceMatch
    indent: int
    start: Point
    end: Point
    lines: list[str] = field(default_factory=list)


@dataclass(slots=True)
class _IndentedCodeLeaf:
    start: Point
    end: Point
    lines: list[str] = field(default_factory=list)
    blanks: list[str] = field(default_factory=list)

    def add(self, line: Line) -> None:
        self.lines.extend(self.blanks)
        self.blanks.clear()
        self.lines.append(line.text[line.pos :])
        self.end = line.point(len(line.text))


type _Leaf = _ParagraphLeaf | _FenceLeaf | _IndentedCodeLeaf


class Lexer(
    FenceClassifierMixin,
    FootnoteClassifierMixin,
    HeadingClassifierMixin,
    ListClassifierMixin,
    ThematicClassifierMixin,
):
    """Line-oriented block lexer with inline scanning of leaf content.

    Footnote syntax is recognized only when the active ParseConfig enables
    it (see footmark.config).

    Usage:
            >>> events = list(Lexer("[^a]: b").tokenize())
            >>> [f"{e.kind.name} {e.token.type.name}" for e in events][:2]
            ['ENTER DOCUMENT', 'ENTER PARAGRAPH']

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_footnotes_enabled",
        "_max_label_length",
        "_containers",
        "_leaf",
        "_end",
    )

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize lexer with source text.

        Args:
            source: Markdown source text
            source_file: Optional source file path for token locations
        """
        config = get_parse_config()
        self._source = source
        self._source_file = source_file
        self._footnotes_enabled = config.footnotes_enabled
        self._max_label_length = config.max_label_length
        self._containers = ContainerStack(Point(1, 1, 0))
        self._leaf: _Leaf | None = None
        self._end = Point(1, 1, 0)

    def tokenize(self) -> Iterator[Event]:
        """Tokenize source into an event stream.

        Yields:
            Events in document order, starting with ENTER DOCUMENT and
            ending with EXIT DOCUMENT.
        """
        origin = Point(1, 1, 0)
        yield enter(self._token(TokenType.DOCUMENT, "", origin, origin))
        for line in self._lines():
            yield from self._scan_line(line)
        yield from self._close_leaf()
        yield from self._close_containers(1)
        yield exit_(self._token(TokenType.DOCUMENT, "", origin, self._end))

    def _lines(self) -> Iterator[Line]:
        offset = 0
        for lineno, raw in enumerate(self._source.split("\n"), start=1):
            text = raw[:-1] if raw.endswith("\r") else raw
            yield Line(text=text, lineno=lineno, start=offset)
            self._end = Point(lineno, len(raw) + 1, offset + len(raw))
            offset += len(raw) + 1

    def _token(self, token_type: TokenType, value: str, start: Point, end: Point) -> Token:
        return Token.spanning(token_type, value, start, end, self._source_file)

    # =========================================================================
    # Line dispatch
    # =========================================================================

    def _scan_line(self, line: Line) -> Iterator[Event]:
        stack = self._containers
        matched = self._match_containers(line)
        all_matched = matched == len(stack)

        if isinstance(self._leaf, _FenceLeaf):
            if all_matched:
                yield from self._continue_fence(line, self._leaf)
                return
            # A fence never continues lazily; its container ending closes it
            yield from self._close_leaf()

        if line.is_blank():
            if isinstance(self._leaf, _IndentedCodeLeaf):
                line.advance_columns(4)
                self._leaf.blanks.append(line.text[line.pos :])
            else:
                yield from self._close_leaf()
            stack.mark_blank_line()
            return

        paragraph = self._leaf if isinstance(self._leaf, _ParagraphLeaf) else None
        innermost = stack.frames[matched - 1]
        sibling_bullet = innermost.bullet if innermost.container_type == ContainerType.LIST else None
        openings = self._classify_openings(
            line, paragraph_open=paragraph is not None, sibling_bullet=sibling_bullet
        )

        if (
            not openings
            and not all_matched
            and paragraph is not None
            and not self._starts_leaf_block(line)
        ):
            paragraph.add(line)
            return

        if openings or not all_matched:
            yield from self._close_leaf()
        if not all_matched:
            yield from self._close_containers(matched)

        # A list stays open only while a sibling item continues it
        top = stack.top
        if top.container_type == ContainerType.LIST:
            first = openings[0] if openings else None
            if (
                first is None
                or first.container_type != ContainerType.LIST_ITEM
                or first.bullet != top.bullet
            ):
                yield from self._close_containers(len(stack) - 1)

        for opening in openings:
            yield from self._open_container(opening)

        if openings and line.is_blank():
            return
        yield from self._scan_leaf(line)

    def _match_containers(self, line: Line) -> int:
        """Consume the indentation of every open container the line continues.

        Returns:
            Number of frames matched, counting the document frame.
        """
        blank = line.is_blank()
        matched = 1
        for frame in self._containers.frames[1:]:
            if frame.container_type == ContainerType.LIST or blank:
                matched += 1
                continue
            indent, _ = line.scan_indent()
            if not frame.continues(line.col + indent, blank):
                break
            line.advance_columns(frame.content_indent - line.col)
            matched += 1
        return matched

    def _classify_openings(
        self, line: Line, *, paragraph_open: bool, sibling_bullet: str | None = None
    ) -> list[_Opening]:
        """Find the container markers at the cursor, consuming them.

        ``sibling_bullet`` is the bullet of a list the line may add an item to.
        """
        openings: list[_Opening] = []
        while True:
            indent, index = line.scan_indent()
            if indent >= 4 or index >= len(line.text):
                break
            column = line.col + indent

            if self._footnotes_enabled:
                definition = self._try_classify_footnote_def(line.text, index)
                if definition is not None:
                    label = self._token(
                        TokenType.FOOTNOTE_DEFINITION_LABEL_STRING,
                        line.text[definition.label_start : definition.label_end],
                        line.point(definition.label_start),
                        line.point(definition.label_end),
                    )
                    openings.append(
                        _Opening(
                            container_type=ContainerType.FOOTNOTE_DEFINITION,
                            start=line.point(index),
                            end=line.point(definition.marker_end),
                            content_indent=column + 4,
                            label=label,
                        )
                    )
                    line.advance_to(definition.marker_end)
                    _, content = line.scan_indent()
                    line.advance_to(content)
                    # Content after the marker sits at the definition's content column
                    line.col = column + 4
                    continue

            if self._is_thematic_break(line.text, index):
                break

            marker = self._try_classify_list_marker(line.text, index, column)
            if marker is None:
                break
            # An empty item cannot interrupt a paragraph, only continue a list
            if (
                marker.empty
                and paragraph_open
                and not openings
                and marker.bullet != sibling_bullet
            ):
                break
            openings.append(
                _Opening(
                    container_type=ContainerType.LIST_ITEM,
                    start=line.point(index),
                    end=line.point(index + 1),
                    content_indent=column + 1 + marker.spaces,
                    bullet=marker.bullet,
                )
            )
            line.advance_to(index + 1)
            line.advance_columns(marker.spaces)
        return openings

    def _starts_leaf_block(self, line: Line) -> bool:
        """Would this line start a non-paragraph leaf block (so it is not lazy)?"""
        indent, index = line.scan_indent()
        if indent >= 4:
            return False
        return (
            self._try_classify_fence_start(line.text, index) is not None
            or self._try_classify_atx_heading(line.text, index) is not None
            or self._is_thematic_break(line.text, index)
        )

    # =========================================================================
    # Containers
    # =========================================================================

    def _open_container(self, opening: _Opening) -> Iterator[Event]:
        stack = self._containers

        if opening.container_type == ContainerType.FOOTNOTE_DEFINITION:
            assert opening.label is not None
            stack.note_block_start()
            stack.push(
                ContainerFrame(
                    container_type=ContainerType.FOOTNOTE_DEFINITION,
                    start=opening.start,
                    end=opening.end,
                    content_indent=opening.content_indent,
                )
            )
            yield enter(
                self._token(TokenType.FOOTNOTE_DEFINITION, "", opening.start, opening.end)
            )
            yield enter(opening.label)
            yield exit_(opening.label)
            return

        top = stack.top
        if top.container_type == ContainerType.LIST and top.bullet == opening.bullet:
            stack.note_block_start()
        else:
            stack.note_block_start()
            stack.push(
                ContainerFrame(
                    container_type=ContainerType.LIST,
                    start=opening.start,
                    end=opening.end,
                    bullet=opening.bullet,
                )
            )
            yield enter(self._token(TokenType.LIST, "", opening.start, opening.end))

        stack.push(
            ContainerFrame(
                container_type=ContainerType.LIST_ITEM,
                start=opening.start,
                end=opening.end,
                content_indent=opening.content_indent,
                bullet=opening.bullet,
            )
        )
        yield enter(self._token(TokenType.LIST_ITEM, "", opening.start, opening.end))

    def _close_containers(self, depth: int) -> Iterator[Event]:
        """Close containers until ``depth`` frames remain."""
        stack = self._containers
        while len(stack) > depth:
            frame = stack.pop()
            assert frame.end is not None
            match frame.container_type:
                case ContainerType.FOOTNOTE_DEFINITION:
                    token_type, value = TokenType.FOOTNOTE_DEFINITION, ""
                case ContainerType.LIST:
                    token_type = TokenType.LIST
                    value = "loose" if frame.is_loose else "tight"
                case ContainerType.LIST_ITEM:
                    token_type, value = TokenType.LIST_ITEM, ""
                case _:
                    raise AssertionError(f"unexpected container {frame.container_type}")
            yield exit_(self._token(token_type, value, frame.start, frame.end))

    # =========================================================================
    # Leaf blocks
    # =========================================================================

    def _scan_leaf(self, line: Line) -> Iterator[Event]:
        leaf = self._leaf
        stack = self._containers
        indent, index = line.scan_indent()

        # Indented code cannot interrupt a paragraph
        if indent >= 4 and not isinstance(leaf, _ParagraphLeaf):
            start = line.point(line.pos)
            line.advance_columns(4)
            if not isinstance(leaf, _IndentedCodeLeaf):
                stack.note_block_start()
                leaf = self._leaf = _IndentedCodeLeaf(start=start, end=start)
            leaf.add(line)
            return

        if isinstance(leaf, _IndentedCodeLeaf):
            yield from self._close_leaf()
            leaf = None

        fence = self._try_classify_fence_start(line.text, index)
        if fence is not None:
            yield from self._close_leaf()
            stack.note_block_start()
            self._leaf = _FenceLeaf(
                match=fence,
                indent=indent,
                start=line.point(index),
                end=line.point(line.content_end),
            )
            return

        heading = self._try_classify_atx_heading(line.text, index)
        if heading is not None:
            yield from self._close_leaf()
            stack.note_block_start()
            yield from self._emit_heading(line, index, heading)
            return

        if self._is_thematic_break(line.text, index):
            yield from self._close_leaf()
            stack.note_block_start()
            token = self._token(
                TokenType.THEMATIC_BREAK, "", line.point(index), line.point(line.content_end)
            )
            yield enter(token)
            yield exit_(token)
            stack.touch(token.end)
            return

        if isinstance(leaf, _ParagraphLeaf):
            leaf.add(line)
            return
        stack.note_block_start()
        paragraph = _ParagraphLeaf()
        paragraph.add(line)
        self._leaf = paragraph

    def _continue_fence(self, line: Line, leaf: _FenceLeaf) -> Iterator[Event]:
        indent, index = line.scan_indent()
        if indent < 4:
            close_end = self._is_closing_fence(line.text, index, leaf.match.char, leaf.match.count)
            if close_end is not None:
                leaf.end = line.point(close_end)
                yield from self._close_leaf()
                return
        line.advance_columns(leaf.indent)
        leaf.lines.append(line.text[line.pos :])
        leaf.end = line.point(len(line.text))

    def _emit_heading(self, line: Line, index: int, heading: HeadingMatch) -> Iterator[Event]:
        token = self._token(
            TokenType.HEADING, str(heading.level), line.point(index), line.point(heading.end)
        )
        yield enter(token)
        if heading.content_end > heading.content_start:
            segment = (
                line.text[heading.content_start : heading.content_end],
                line.point(heading.content_start),
            )
            yield from self._inline([segment])
        yield exit_(token)
        self._containers.touch(token.end)

    def _close_leaf(self) -> Iterator[Event]:
        """Emit the buffered leaf block, if any."""
        leaf = self._leaf
        if leaf is None:
            return
        self._leaf = None

        match leaf:
            case _ParagraphLeaf(segments=segments, end=end):
                assert end is not None
                token = self._token(TokenType.PARAGRAPH, "", segments[0][1], end)
                yield enter(token)
                yield from self._inline(segments)
                yield exit_(token)
            case _FenceLeaf(match=match, start=start, end=end, lines=lines):
                yield enter(self._token(TokenType.FENCED_CODE, match.info or "", start, end))
                yield exit_(self._token(TokenType.FENCED_CODE, "\n".join(lines), start, end))
            case _IndentedCodeLeaf(start=start, end=end, lines=lines):
                yield enter(self._token(TokenType.INDENTED_CODE, "", start, end))
                yield exit_(self._token(TokenType.INDENTED_CODE, "\n".join(lines), start, end))
        self._containers.touch(end)

    def _inline(self, segments: list[tuple[str, Point]]) -> list[Event]:
        return InlineScanner(
            segments,
            footnotes_enabled=self._footnotes_enabled,
            max_label_length=self._max_label_length,
            source_file=self._source_file,
        ).scan()
