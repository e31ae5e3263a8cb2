"""Footnote label normalization.

Definitions and references are matched through a canonical identifier, so
``[^Note 1]`` and ``[^note   1]`` both refer to ``note 1``. The same
normalizer is used by the parser and by callers building trees by hand.
"""

from __future__ import annotations

import re

# Pattern for whitespace normalization
_WHITESPACE_PATTERN = re.compile(r"\s+")

# A backslash pair, or an escaped closing bracket
_LABEL_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


def normalize_identifier(raw: str) -> str:
    """Normalize a footnote label into its identifier.

    Collapses runs of whitespace to a single space, trims both ends and
    case-folds the result. Total for every string; an empty or
    whitespace-only label normalizes to ``""``, which callers must reject.

    Args:
        raw: Label text as written

    Returns:
        Canonical identifier

    Example:
        >>> normalize_identifier("  Foo \\n Bar ")
        'foo bar'

    """
    return _WHITESPACE_PATTERN.sub(" ", raw).strip(" ").casefold()


def unescape_label(raw: str) -> str:
    """Resolve ``\\]`` escapes in a label taken from source.

    ``\\]`` is the only escape the serializer writes inside labels, so it is
    the only one resolved here. Other backslash pairs (``\\\\``, ``\\[``)
    are kept as written, which keeps a parsed label stable across a
    serialize/parse cycle.

    Example:
        >>> unescape_label("X\\\\]Y")
        'X]Y'

    """
    if "\\" not in raw:
        return raw
    return _LABEL_ESCAPE_PATTERN.sub(
        lambda m: "]" if m.group(1) == "]" else m.group(0),
        raw,
    )
