"""Inline scanner for paragraph and heading content.

Turns the lines of one paragraph (or the text of one heading) into inline
events: text runs, code spans and footnote calls. Positions are mapped
back to the original source through the start point of every line, so
text spanning a soft line break still reports exact offsets.

Recognized constructs:
- Backslash escapes of ASCII punctuation (resolved into the text run)
- Code spans delimited by equal-length backtick runs
- Footnote calls ``[^label]`` (when footnotes are enabled)

Anything else is literal text. Adjacent literal pieces form one run.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence

from footmark.lexer.classifiers.footnote import scan_label
from footmark.location import Point
from footmark.tokens import Event, Token, TokenType, enter, exit_

# CommonMark: ASCII punctuation characters
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


class InlineScanner:
    """Scan joined paragraph lines into inline events.

    Usage:
        >>> scanner = InlineScanner([("b", Point(1, 7, 6)), ("c", Point(2, 1, 8))])
        >>> [e.token.value for e in scanner.scan()]
        ['b\\nc', 'b\\nc']

    """

    __slots__ = (
        "_text",
        "_segments",
        "_starts",
        "_footnotes_enabled",
        "_max_label_length",
        "_source_file",
    )

    def __init__(
        self,
        segments: Sequence[tuple[str, Point]],
        *,
        footnotes_enabled: bool = False,
        max_label_length: int = 999,
        source_file: str | None = None,
    ) -> None:
        """Initialize with the content lines to scan.

        Args:
            segments: Each line's text and the source point of its first character
            footnotes_enabled: Recognize footnote calls
            max_label_length: Longest accepted footnote label
            source_file: Optional source file path for token locations
        """
        self._segments = list(segments)
        self._text = "\n".join(text for text, _ in self._segments)
        self._starts: list[int] = []
        position = 0
        for text, _ in self._segments:
            self._starts.append(position)
            position += len(text) + 1
        self._footnotes_enabled = footnotes_enabled
        self._max_label_length = max_label_length
        self._source_file = source_file

    def _point(self, index: int) -> Point:
        """Map an index in the joined text back to a source point."""
        k = bisect_right(self._starts, index) - 1
        _, origin = self._segments[k]
        within = index - self._starts[k]
        return Point(origin.line, origin.column + within, origin.offset + within)

    def _token(self, token_type: TokenType, value: str, start: int, end: int) -> Token:
        return Token.spanning(
            token_type, value, self._point(start), self._point(end), self._source_file
        )

    def scan(self) -> list[Event]:
        """Scan the content into inline events."""
        text = self._text
        text_len = len(text)
        events: list[Event] = []
        buffer: list[str] = []
        run_start = -1
        pos = 0

        while pos < text_len:
            char = text[pos]

            if char == "\\" and pos + 1 < text_len and text[pos + 1] in ASCII_PUNCTUATION:
                if run_start < 0:
                    run_start = pos
                buffer.append(text[pos + 1])
                pos += 2
                continue

            if char == "`":
                run = self._backtick_run(pos)
                close = self._find_closing_backticks(pos + run, run)
                if close < 0:
                    if run_start < 0:
                        run_start = pos
                    buffer.append(text[pos : pos + run])
                    pos += run
                    continue
                self._flush(events, buffer, run_start, pos)
                buffer, run_start = [], -1
                code = _normalize_code_span(text[pos + run : close])
                token = self._token(TokenType.CODE_SPAN, code, pos, close + run)
                events.append(enter(token))
                events.append(exit_(token))
                pos = close + run
                continue

            if char == "[" and self._footnotes_enabled and text.startswith("^", pos + 1):
                label_end = scan_label(text, pos + 2, self._max_label_length)
                if label_end is not None:
                    self._flush(events, buffer, run_start, pos)
                    buffer, run_start = [], -1
                    call = self._token(TokenType.FOOTNOTE_CALL, "", pos, label_end + 1)
                    label = self._token(
                        TokenType.FOOTNOTE_CALL_STRING,
                        text[pos + 2 : label_end],
                        pos + 2,
                        label_end,
                    )
                    events.extend((enter(call), enter(label), exit_(label), exit_(call)))
                    pos = label_end + 1
                    continue

            if run_start < 0:
                run_start = pos
            buffer.append(char)
            pos += 1

        self._flush(events, buffer, run_start, text_len)
        return events

    def _flush(self, events: list[Event], buffer: list[str], run_start: int, end: int) -> None:
        if run_start < 0:
            return
        token = self._token(TokenType.TEXT, "".join(buffer), run_start, end)
        events.append(enter(token))
        events.append(exit_(token))

    def _backtick_run(self, pos: int) -> int:
        end = pos
        while end < len(self._text) and self._text[end] == "`":
            end += 1
        return end - pos

    def _find_closing_backticks(self, pos: int, length: int) -> int:
        """Find a backtick run of exactly ``length`` at or after ``pos``."""
        text = self._text
        while True:
            pos = text.find("`", pos)
            if pos < 0:
                return -1
            run = self._backtick_run(pos)
            if run == length:
                return pos
            pos += run


def _normalize_code_span(code: str) -> str:
    """CommonMark: line endings become spaces; one padding space is stripped."""
    code = code.replace("\n", " ")
    if len(code) >= 2 and code[0] == " " and code[-1] == " " and code.strip(" "):
        code = code[1:-1]
    return code
