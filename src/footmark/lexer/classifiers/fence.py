"""Fenced code block classifier mixin."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FenceMatch:
    """An opening code fence.

    Attributes:
        char: Fence character (backtick or tilde)
        count: Length of the fence run
        info: Info string after the fence, stripped (None when empty)

    """

    char: str
    count: int
    info: str | None


class FenceClassifierMixin:
    """Mixin providing fenced code block classification."""

    def _try_classify_fence_start(self, text: str, index: int) -> FenceMatch | None:
        """Try to classify ``text[index:]`` as an opening fence.

        Fenced code blocks start with 3+ backticks or tildes.
        Backtick fences cannot have backticks in the info string.
        """
        if index >= len(text) or text[index] not in "`~":
            return None

        fence_char = text[index]
        pos = index
        while pos < len(text) and text[pos] == fence_char:
            pos += 1
        count = pos - index
        if count < 3:
            return None

        info = text[pos:].strip()
        if fence_char == "`" and "`" in info:
            return None

        return FenceMatch(char=fence_char, count=count, info=info or None)

    def _is_closing_fence(self, text: str, index: int, char: str, count: int) -> int | None:
        """Check whether ``text[index:]`` closes a fence opened with ``count`` ``char``s.

        Returns:
            Index just past the closing run, or None.
        """
        pos = index
        while pos < len(text) and text[pos] == char:
            pos += 1
        if pos - index < count or text[pos:].strip(" \t"):
            return None
        return pos
