"""ATX heading classifier mixin."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HeadingMatch:
    """An ATX heading line.

    ``content_start``/``content_end`` index the heading text in the line,
    with surrounding whitespace and any closing ``#`` sequence removed.
    ``end`` indexes the end of the line's non-whitespace content.
    """

    level: int
    content_start: int
    content_end: int
    end: int


class HeadingClassifierMixin:
    """Mixin providing ATX heading classification."""

    def _try_classify_atx_heading(self, text: str, index: int) -> HeadingMatch | None:
        """Try to classify ``text[index:]`` as an ATX heading.

        ATX headings start with 1-6 # characters followed by space/tab/end.
        Trailing # sequences are removed if preceded by space.
        """
        level = 0
        pos = index
        while pos < len(text) and text[pos] == "#":
            level += 1
            pos += 1

        if level == 0 or level > 6:
            return None
        if pos < len(text) and text[pos] not in " \t":
            return None

        end = len(text.rstrip(" \t"))
        start = pos
        while start < end and text[start] in " \t":
            start += 1

        # Remove trailing # sequence (if preceded by space)
        content_end = end
        trailing = content_end
        while trailing > start and text[trailing - 1] == "#":
            trailing -= 1
        if trailing < content_end:
            if trailing == start:
                content_end = start
            elif text[trailing - 1] in " \t":
                content_end = len(text[:trailing].rstrip(" \t"))

        return HeadingMatch(
            level=level,
            content_start=start,
            content_end=max(content_end, start),
            end=max(end, pos),
        )
