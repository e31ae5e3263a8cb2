"""Event-driven tree builder.

Consumes the lexer's enter/exit events and assembles the typed AST. Each
token type is handled by an enter handler and an exit handler; handlers
come from extensions, so new syntax plugs in without touching the
builder.

Building works on an explicit stack of open frames. An enter handler
pushes a frame for the node being built; nested nodes are collected as
that frame's children; the matching exit handler pops the frame and
creates the frozen node, with a location spanning the enter token's start
to the exit token's end.

Thread Safety:
Every ``build()`` call creates its own BuildContext. Extensions are
immutable and may be shared between threads.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from footmark.errors import ParseError
from footmark.location import SourceLocation
from footmark.nodes import (
    CodeSpan,
    Document,
    FencedCode,
    Heading,
    IndentedCode,
    List,
    ListItem,
    Node,
    Paragraph,
    Text,
    ThematicBreak,
)
from footmark.tokens import Event, EventKind, Token, TokenType

type Handler = Callable[[BuildContext, Token], None]


@dataclass(frozen=True, slots=True)
class FromMarkdownExtension:
    """Enter and exit handlers for a set of token types.

    Attributes:
        enter: Handlers called when a token of the given type opens
        exit: Handlers called when it closes

    """

    enter: Mapping[TokenType, Handler] = field(default_factory=dict)
    exit: Mapping[TokenType, Handler] = field(default_factory=dict)


@dataclass(slots=True)
class OpenNode:
    """A node under construction.

    Attributes:
        node_type: Class of the node created when the frame closes
        start: Token that opened the frame
        fields: Keyword arguments for the node, filled in by handlers
        children: Nodes completed while this frame was innermost
        children_field: Field receiving ``children`` (None for leaves)

    """

    node_type: type[Node]
    start: Token
    fields: dict[str, Any] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    children_field: str | None = "children"


class BuildContext:
    """Per-call state of the tree builder."""

    __slots__ = ("_stack", "_source_file", "_result")

    def __init__(self, source_file: str | None = None) -> None:
        self._stack: list[OpenNode] = []
        self._source_file = source_file
        self._result: Node | None = None

    @property
    def current(self) -> OpenNode:
        """The innermost open frame."""
        if not self._stack:
            raise ParseError("No node is open", source_file=self._source_file)
        return self._stack[-1]

    def enter_node(
        self,
        node_type: type[Node],
        token: Token,
        *,
        children_field: str | None = "children",
        **fields: Any,
    ) -> OpenNode:
        """Open a frame for a node of ``node_type`` starting at ``token``."""
        frame = OpenNode(
            node_type=node_type,
            start=token,
            fields=dict(fields),
            children_field=children_field,
        )
        self._stack.append(frame)
        return frame

    def exit_node(self, token: Token, **fields: Any) -> Node:
        """Close the innermost frame at ``token`` and attach the node to its parent.

        Raises:
            ParseError: If the innermost frame was opened by another token type
        """
        frame = self.current
        if frame.start.type != token.type:
            raise ParseError(
                f"Cannot close {token.type.name} while {frame.start.type.name} is open",
                token.lineno,
                token.col,
                self._source_file,
            )
        self._stack.pop()

        kwargs = {**frame.fields, **fields}
        if frame.children_field is not None:
            kwargs[frame.children_field] = tuple(frame.children)
        location = SourceLocation.between(frame.start.start, token.end, self._source_file)
        node = frame.node_type(location=location, **kwargs)

        if self._stack:
            self._stack[-1].children.append(node)
        else:
            self._result = node
        return node

    def append(self, node: Node) -> None:
        """Add a finished node to the innermost frame."""
        self.current.children.append(node)

    def finish(self) -> Document:
        """Return the built document.

        Raises:
            ParseError: If frames are still open or no document was built
        """
        if self._stack:
            frame = self._stack[-1]
            raise ParseError(
                f"Unclosed {frame.start.type.name}",
                frame.start.lineno,
                frame.start.col,
                self._source_file,
            )
        if not isinstance(self._result, Document):
            raise ParseError("Event stream did not produce a document", source_file=self._source_file)
        return self._result


# =============================================================================
# Core handlers
# =============================================================================


def _open(node_type: type[Node], children_field: str | None = "children") -> Handler:
    def handler(ctx: BuildContext, token: Token) -> None:
        ctx.enter_node(node_type, token, children_field=children_field)

    return handler


def _close(ctx: BuildContext, token: Token) -> None:
    ctx.exit_node(token)


def _enter_heading(ctx: BuildContext, token: Token) -> None:
    ctx.enter_node(Heading, token, level=int(token.value))


def _enter_fenced_code(ctx: BuildContext, token: Token) -> None:
    ctx.enter_node(FencedCode, token, children_field=None, info=token.value or None)


def _exit_code(ctx: BuildContext, token: Token) -> None:
    ctx.exit_node(token, code=token.value)


def _exit_list(ctx: BuildContext, token: Token) -> None:
    ctx.exit_node(token, tight=token.value != "loose")


def _exit_text(ctx: BuildContext, token: Token) -> None:
    ctx.exit_node(token, content=token.value)


CORE_EXTENSION = FromMarkdownExtension(
    enter={
        TokenType.DOCUMENT: _open(Document),
        TokenType.PARAGRAPH: _open(Paragraph),
        TokenType.HEADING: _enter_heading,
        TokenType.FENCED_CODE: _enter_fenced_code,
        TokenType.INDENTED_CODE: _open(IndentedCode, None),
        TokenType.THEMATIC_BREAK: _open(ThematicBreak, None),
        TokenType.LIST: _open(List, "items"),
        TokenType.LIST_ITEM: _open(ListItem),
        TokenType.TEXT: _open(Text, None),
        TokenType.CODE_SPAN: _open(CodeSpan, None),
    },
    exit={
        TokenType.DOCUMENT: _close,
        TokenType.PARAGRAPH: _close,
        TokenType.HEADING: _close,
        TokenType.FENCED_CODE: _exit_code,
        TokenType.INDENTED_CODE: _exit_code,
        TokenType.THEMATIC_BREAK: _close,
        TokenType.LIST: _exit_list,
        TokenType.LIST_ITEM: _close,
        TokenType.TEXT: _exit_text,
        TokenType.CODE_SPAN: _exit_code,
    },
)


def build(
    events: Iterable[Event],
    extensions: Iterable[FromMarkdownExtension] = (),
    source_file: str | None = None,
) -> Document:
    """Build a Document from an event stream.

    Core handlers are applied first; each extension then adds or replaces
    handlers, later extensions winning.

    Raises:
        ParseError: If a token has no handler or the events are not well nested
    """
    enter_handlers: dict[TokenType, Handler] = dict(CORE_EXTENSION.enter)
    exit_handlers: dict[TokenType, Handler] = dict(CORE_EXTENSION.exit)
    for extension in extensions:
        enter_handlers.update(extension.enter)
        exit_handlers.update(extension.exit)

    ctx = BuildContext(source_file)
    for event in events:
        token = event.token
        handlers = enter_handlers if event.kind == EventKind.ENTER else exit_handlers
        handler = handlers.get(token.type)
        if handler is None:
            raise ParseError(
                f"No {event.kind.name.lower()} handler for {token.type.name}",
                token.lineno,
                token.col,
                source_file,
            )
        handler(ctx, token)
    return ctx.finish()
