"""Core to-markdown handlers.

One function per node class, dispatched by SerializerState. Blocks are
written without trailing newlines; the containing flow joins them.
"""

from __future__ import annotations

import re

from footmark.nodes import (
    CodeSpan,
    Document,
    FencedCode,
    FootnoteDefinition,
    Heading,
    IndentedCode,
    List,
    ListItem,
    Paragraph,
    Text,
    ThematicBreak,
)
from footmark.serializing.state import Info, SerializerState, ToMarkdownExtension
from footmark.serializing.unsafe import CORE_UNSAFE, HEADING_ATX, PHRASING

_BACKTICK_RUN = re.compile(r"`+")
_TILDE_RUN = re.compile(r"~+")

# Code that would lose leading or trailing blank lines as indented code
_BLANK_EDGE = re.compile(r"^[ \t]*(?:\n|$)|(?:^|\n)[ \t]*$")

# Indented code written right after one of these would continue it
_CONTINUED_BY_INDENT = (FootnoteDefinition, List, IndentedCode)


def handle_document(node: Document, state: SerializerState, info: Info) -> str:
    return state.container_flow(node)


def handle_paragraph(node: Paragraph, state: SerializerState, info: Info) -> str:
    with state.enter("paragraph", PHRASING):
        return state.container_phrasing(node, info)


def handle_heading(node: Heading, state: SerializerState, info: Info) -> str:
    marker = "#" * node.level
    with state.enter(HEADING_ATX, PHRASING):
        content = state.container_phrasing(node, Info(" ", "\n"))
    return f"{marker} {content}" if content else marker


def handle_text(node: Text, state: SerializerState, info: Info) -> str:
    return state.safe(node.content, info.before, info.after)


def handle_code_span(node: CodeSpan, state: SerializerState, info: Info) -> str:
    """Wrap in the shortest backtick run that does not occur in the code."""
    code = node.code
    runs = {len(run) for run in _BACKTICK_RUN.findall(code)}
    size = 1
    while size in runs:
        size += 1
    fence = "`" * size
    # Padding keeps edge backticks and edge spaces from being stripped
    if code and (
        code[0] == "`"
        or code[-1] == "`"
        or (code[0] == " " and code[-1] == " " and code.strip(" "))
    ):
        code = f" {code} "
    return f"{fence}{code}{fence}"


def handle_fenced_code(node: FencedCode, state: SerializerState, info: Info) -> str:
    return _fenced(node.code, node.info, state)


def handle_indented_code(node: IndentedCode, state: SerializerState, info: Info) -> str:
    if (
        state.config.fences
        or not node.code
        or _BLANK_EDGE.search(node.code)
        or isinstance(state.previous, _CONTINUED_BY_INDENT)
    ):
        return _fenced(node.code, None, state)
    return state.indent_lines(node.code, lambda line, index, blank: line and "    " + line)


def _fenced(code: str, lang: str | None, state: SerializerState) -> str:
    char = state.config.fence
    if char == "`" and lang and "`" in lang:
        char = "~"
    runs = _BACKTICK_RUN if char == "`" else _TILDE_RUN
    size = max([3, *(len(run) + 1 for run in runs.findall(code))])
    fence = char * size
    opening = f"{fence}{lang}" if lang else fence
    if code:
        return f"{opening}\n{code}\n{fence}"
    return f"{opening}\n{fence}"


def handle_thematic_break(node: ThematicBreak, state: SerializerState, info: Info) -> str:
    return state.config.rule * 3


def handle_list(node: List, state: SerializerState, info: Info) -> str:
    """Write a bullet list; a list right after another gets the other bullet."""
    bullet = state.config.bullet
    if state.bullet_last_used == bullet:
        bullet = state.config.bullet_other
    if bullet == state.config.rule and any(
        item.children and isinstance(item.children[0], ThematicBreak) for item in node.items
    ):
        # `* ***` reads back as a single thematic break
        bullet = next(b for b in "*-+" if b not in (state.config.rule, state.bullet_last_used))
    with state.enter("list"), state.list_context(bullet, node.tight):
        value = state.container_flow(node)
    state.bullet_last_used = bullet
    return value


def handle_list_item(node: ListItem, state: SerializerState, info: Info) -> str:
    bullet = state.bullet
    size = len(bullet) + 1
    with state.enter("listItem"):
        value = state.container_flow(node)
    if not value:
        return bullet

    def map_line(line: str, index: int, blank: bool) -> str:
        if index == 0:
            return f"{bullet} {line}"
        return "" if blank else " " * size + line

    return state.indent_lines(value, map_line)


CORE_TO_MARKDOWN = ToMarkdownExtension(
    handlers={
        Document: handle_document,
        Paragraph: handle_paragraph,
        Heading: handle_heading,
        Text: handle_text,
        CodeSpan: handle_code_span,
        FencedCode: handle_fenced_code,
        IndentedCode: handle_indented_code,
        ThematicBreak: handle_thematic_break,
        List: handle_list,
        ListItem: handle_list_item,
    },
    peek={
        CodeSpan: lambda node, state: "`",
    },
    unsafe=CORE_UNSAFE,
)
