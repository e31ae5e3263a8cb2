"""Markdown serialization of footnote calls and definitions.

Writes:
    FootnoteReference   [^label]
    FootnoteDefinition  [^label]: first line
                            continuation lines, indented four spaces

The label is written from ``label`` when set, else from ``identifier``,
with ``]`` escaped. Text elsewhere is escaped wherever it would read back
as a footnote call or definition.
"""

from __future__ import annotations

from typing import assert_never

from footmark.errors import SerializeError
from footmark.nodes import FootnoteDefinition, FootnoteNode, FootnoteReference
from footmark.serializing.state import Info, SerializerState, ToMarkdownExtension
from footmark.serializing.unsafe import (
    LABEL,
    LABEL_CONSTRUCTS,
    PHRASING,
    REFERENCE,
    UnsafePattern,
)
from footmark.utils.logger import get_logger

logger = get_logger(__name__)

_PHRASING = frozenset({PHRASING})

FOOTNOTE_UNSAFE: tuple[UnsafePattern, ...] = (
    # [^a] would be a call
    UnsafePattern(
        "[", after=r"\^", in_construct=_PHRASING, not_in_construct=LABEL_CONSTRUCTS
    ),
    # ^[a] would be an inline note
    UnsafePattern(
        "[", before=r"\^", in_construct=_PHRASING, not_in_construct=LABEL_CONSTRUCTS
    ),
    # [a]: at the start of a line would be a definition
    UnsafePattern(
        "[",
        after=r"(?:\\.|[^\\\[\]\n])*\]:",
        at_break=True,
        not_in_construct=LABEL_CONSTRUCTS,
    ),
    # a call followed by : at the start of a line would be a definition
    UnsafePattern(
        ":", before=r"^\]", in_construct=_PHRASING, not_in_construct=LABEL_CONSTRUCTS
    ),
    # ] would end the label
    UnsafePattern("]", in_construct=LABEL_CONSTRUCTS),
)

_INDENT = "    "


def _map_except_first(line: str, index: int, blank: bool) -> str:
    return line if index == 0 or blank else _INDENT + line


def _map_all(line: str, index: int, blank: bool) -> str:
    return line if blank else _INDENT + line


def _peek_reference(node: FootnoteReference, state: SerializerState) -> str:
    return "["


def footnote_to_markdown(first_line_blank: bool = False) -> ToMarkdownExtension:
    """Create the extension that writes footnote nodes as Markdown.

    Args:
        first_line_blank: Start definition content on the line after
            ``[^label]:`` instead of on the same line

    Example:
        >>> from footmark.serializing import serialize
        >>> serialize(FootnoteReference(identifier="a"), [footnote_to_markdown()])
        '[^a]\\n'

    """

    def handle_footnote(node: FootnoteNode, state: SerializerState, info: Info) -> str:
        if not node.association_id:
            raise SerializeError("needs a label or an identifier", node)

        match node:
            case FootnoteReference():
                with state.enter(REFERENCE):
                    label = state.safe(node.association_id, "[^", "]")
                return f"[^{label}]"
            case FootnoteDefinition():
                return _definition(node, state, first_line_blank)
            case _:
                assert_never(node)

    return ToMarkdownExtension(
        handlers={
            FootnoteReference: handle_footnote,
            FootnoteDefinition: handle_footnote,
        },
        peek={FootnoteReference: _peek_reference},
        unsafe=FOOTNOTE_UNSAFE,
    )


def _definition(node: FootnoteDefinition, state: SerializerState, first_line_blank: bool) -> str:
    with state.enter(LABEL):
        label = state.safe(node.association_id, "[^", "]")
    head = f"[^{label}]:"

    with state.enter("footnoteDefinition"):
        body = state.container_flow(node)
    if not body:
        return head

    if not first_line_blank and body[0] in " \t":
        # Leading whitespace after "]: " would be swallowed by the marker
        logger.debug("Writing body of [^%s] below its label", node.association_id)
        first_line_blank = True

    if first_line_blank:
        return f"{head}\n{state.indent_lines(body, _map_all)}"
    return f"{head} {state.indent_lines(body, _map_except_first)}"
