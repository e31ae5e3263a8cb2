"""Unsafe character patterns.

Text written back to Markdown must not turn into syntax when read again.
Each UnsafePattern names one character and the context in which it would
start a construct; the serializer escapes every occurrence that matches a
pattern in scope.

Scope is decided by the construct stack of the serializer: a pattern
applies when one of its ``in_construct`` names is on the stack (or it has
none), and none of its ``not_in_construct`` names is.

Patterns are data: extensions declare their own next to their handlers.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from functools import cache

from footmark.lexer.inline import ASCII_PUNCTUATION

# Constructs that hold plain words: escaping rules for text apply here
PHRASING = "phrasing"
# Footnote label after [^ in a definition, and in a reference
LABEL = "label"
REFERENCE = "reference"
HEADING_ATX = "headingAtx"

# Constructs in which generic phrasing rules do not apply
LABEL_CONSTRUCTS = frozenset({LABEL, REFERENCE})


@dataclass(frozen=True, slots=True)
class UnsafePattern:
    """A character that needs escaping in a given context.

    Attributes:
        character: The ASCII punctuation character to escape
        before: Regex the text just before the character must match
        after: Regex the text just after the character must match
        at_break: The character only matters at the start of a line
        in_construct: The pattern applies only inside one of these
        not_in_construct: The pattern never applies inside these

    """

    character: str
    before: str | None = None
    after: str | None = None
    at_break: bool = False
    in_construct: frozenset[str] = frozenset()
    not_in_construct: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if self.character not in ASCII_PUNCTUATION:
            raise ValueError(
                f"Unsafe character must be ASCII punctuation, got {self.character!r}"
            )

    def in_scope(self, stack: Sequence[str]) -> bool:
        """Does this pattern apply with ``stack`` as the construct stack?"""
        if self.in_construct and not any(name in self.in_construct for name in stack):
            return False
        return not any(name in self.not_in_construct for name in stack)


@cache
def compile_pattern(pattern: UnsafePattern) -> re.Pattern[str]:
    """Compile ``pattern``; group 1 matches the unsafe character itself."""
    prefix = r"(?:^|\n)[ \t]*" if pattern.at_break else ""
    if pattern.before:
        prefix += f"(?:{pattern.before})"
    suffix = f"(?={pattern.after})" if pattern.after else ""
    return re.compile(f"{prefix}({re.escape(pattern.character)}){suffix}")


def unsafe_positions(
    patterns: Sequence[UnsafePattern],
    stack: Sequence[str],
    value: str,
    before: str = "",
    after: str = "",
) -> list[int]:
    """Indexes in ``value`` that need a backslash, in ascending order.

    Patterns are matched against ``before + value + after`` so context on
    either side is taken into account. Each index is reported once, however
    many patterns match it.
    """
    text = before + value + after
    positions: set[int] = set()
    for pattern in patterns:
        if not pattern.in_scope(stack):
            continue
        for match in compile_pattern(pattern).finditer(text):
            index = match.start(1) - len(before)
            if 0 <= index < len(value):
                positions.add(index)
    return sorted(positions)


_PHRASING = frozenset({PHRASING})

CORE_UNSAFE: tuple[UnsafePattern, ...] = (
    # A backslash that would escape what follows it
    UnsafePattern(
        "\\",
        after=r"[!-/:-@\[-`{-~]",
        in_construct=_PHRASING,
        not_in_construct=LABEL_CONSTRUCTS,
    ),
    # Emphasis and code span delimiters
    UnsafePattern("*", in_construct=_PHRASING, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern("_", in_construct=_PHRASING, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern("`", in_construct=_PHRASING, not_in_construct=LABEL_CONSTRUCTS),
    # Character references and raw HTML
    UnsafePattern(
        "&",
        after=r"#?[A-Za-z0-9]+;",
        in_construct=_PHRASING,
        not_in_construct=LABEL_CONSTRUCTS,
    ),
    UnsafePattern(
        "<",
        after=r"[!/?A-Za-z]",
        in_construct=_PHRASING,
        not_in_construct=LABEL_CONSTRUCTS,
    ),
    # Block starts at the beginning of a line
    UnsafePattern("#", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern("-", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern("+", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern(">", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern("~", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern("=", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern(".", before=r"\d+", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    UnsafePattern(")", before=r"\d+", at_break=True, not_in_construct=LABEL_CONSTRUCTS),
    # A closing sequence would be dropped from a heading
    UnsafePattern("#", after=r"(?:\n|$)", in_construct=frozenset({HEADING_ATX})),
)
