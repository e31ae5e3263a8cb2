"""Serializer state shared by all to-markdown handlers.

A SerializerState is created for every ``to_markdown()`` call. It owns
the handler table (core handlers plus extensions), the unsafe pattern
table, the construct stack and the list bookkeeping. Handlers receive it
and call back into it to serialize their children.

Handler contract:
    handler(node, state, info) -> str

``info`` carries one character of context on each side of the value
being produced, which is what unsafe patterns with ``before``/``after``
look at.

Thread Safety:
State is per call; extensions are immutable and shareable.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from footmark.config import SerializeConfig
from footmark.errors import SerializeError
from footmark.nodes import IndentedCode, List, ListItem, Node, Paragraph
from footmark.serializing.unsafe import UnsafePattern, unsafe_positions

type NodeHandler = Callable[[Any, SerializerState, Info], str]
type PeekHandler = Callable[[Any, SerializerState], str]
type LineMap = Callable[[str, int, bool], str]


class Info(NamedTuple):
    """Characters written just before and just after the current value."""

    before: str = "\n"
    after: str = "\n"


@dataclass(frozen=True, slots=True)
class ToMarkdownExtension:
    """Handlers, peeks and unsafe patterns for a set of node types.

    Attributes:
        handlers: Serializer for each node class
        peek: Returns the first character a node serializes to, used as
            context for the node before it. Nodes without a peek are
            serialized once to find out.
        unsafe: Escaping rules the extension's syntax needs

    """

    handlers: Mapping[type[Node], NodeHandler] = field(default_factory=dict)
    peek: Mapping[type[Node], PeekHandler] = field(default_factory=dict)
    unsafe: tuple[UnsafePattern, ...] = ()


class SerializerState:
    """Per-call serializer state.

    Usage:
        >>> state = SerializerState(SerializeConfig(), [CORE_TO_MARKDOWN])
        >>> state.handle(Paragraph(children=(Text("a*b"),)))
        'a\\\\*b'

    """

    __slots__ = (
        "config",
        "bullet_last_used",
        "previous",
        "_handlers",
        "_peeks",
        "_unsafe",
        "_stack",
        "_lists",
    )

    def __init__(
        self,
        config: SerializeConfig,
        extensions: Iterable[ToMarkdownExtension],
    ) -> None:
        self.config = config
        self.bullet_last_used: str | None = None
        # Sibling written just before the block being handled
        self.previous: Node | None = None
        self._handlers: dict[type[Node], NodeHandler] = {}
        self._peeks: dict[type[Node], PeekHandler] = {}
        unsafe: list[UnsafePattern] = []
        for extension in extensions:
            self._handlers.update(extension.handlers)
            self._peeks.update(extension.peek)
            unsafe.extend(extension.unsafe)
        self._unsafe = tuple(unsafe)
        self._stack: list[str] = []
        # (bullet, tight) of every list being serialized, innermost last
        self._lists: list[tuple[str, bool]] = []

    @property
    def stack(self) -> Sequence[str]:
        """Names of the constructs currently being written, innermost last."""
        return tuple(self._stack)

    @contextmanager
    def enter(self, *constructs: str) -> Iterator[None]:
        """Push constructs onto the stack for the duration of the block."""
        self._stack.extend(constructs)
        try:
            yield
        finally:
            del self._stack[len(self._stack) - len(constructs) :]

    def handle(self, node: Node, info: Info | None = None) -> str:
        """Serialize one node with the handler registered for its class.

        Raises:
            SerializeError: If no handler is registered for the node's class
        """
        handler = self._handlers.get(type(node))
        if handler is None:
            raise SerializeError("no to-markdown handler registered", node)
        return handler(node, self, info or Info())

    def peek(self, node: Node) -> str:
        """First character ``node`` serializes to."""
        peek = self._peeks.get(type(node))
        if peek is not None:
            return peek(node, self)
        return self.handle(node, Info("", ""))[:1]

    # =========================================================================
    # Containers
    # =========================================================================

    def container_phrasing(self, parent: Any, info: Info) -> str:
        """Serialize inline children, giving each its neighbours as context.

        The context on each side is a single character: the last one written
        before the child and the peeked first one of the next sibling. Unsafe
        patterns that need more than that across a node boundary are not
        seen, so two adjacent ``Text`` nodes such as ``"[a"`` and ``"]: b"``
        are escaped as if apart. The parser never produces adjacent text
        nodes; merge them before serializing a hand-built tree.
        """
        children = parent.children
        results: list[str] = []
        before = info.before
        for index, child in enumerate(children):
            after = self.peek(children[index + 1]) if index + 1 < len(children) else info.after
            value = self.handle(child, Info(before, after))
            if value:
                before = value[-1]
            results.append(value)
        return "".join(results)

    def container_flow(self, parent: Any) -> str:
        """Serialize block children, separated as their parent requires."""
        children = parent.items if isinstance(parent, List) else parent.children
        results: list[str] = []
        for index, child in enumerate(children):
            if index == 0 or not isinstance(children[index - 1], List):
                self.bullet_last_used = None
            self.previous = children[index - 1] if index else None
            results.append(self.handle(child, Info("\n", "\n")))
            if index + 1 < len(children):
                results.append(self._join(child, children[index + 1], parent))
        return "".join(results)

    def _join(self, left: Node, right: Node, parent: Node) -> str:
        if isinstance(parent, List):
            return "\n" if parent.tight else "\n\n"
        if isinstance(parent, ListItem) and self.list_tight:
            # Neither a paragraph nor indented code can interrupt a paragraph
            if isinstance(left, Paragraph) and isinstance(right, Paragraph | IndentedCode):
                return "\n\n"
            return "\n"
        return "\n\n"

    @contextmanager
    def list_context(self, bullet: str, tight: bool) -> Iterator[None]:
        self._lists.append((bullet, tight))
        try:
            yield
        finally:
            self._lists.pop()

    @property
    def bullet(self) -> str:
        """Bullet of the innermost list being written."""
        return self._lists[-1][0] if self._lists else self.config.bullet

    @property
    def list_tight(self) -> bool:
        return self._lists[-1][1] if self._lists else True

    # =========================================================================
    # Text
    # =========================================================================

    def indent_lines(self, value: str, map_line: LineMap) -> str:
        """Rewrite every line of ``value`` through ``map_line(line, index, blank)``."""
        return "\n".join(
            map_line(line, index, not line) for index, line in enumerate(value.split("\n"))
        )

    def safe(self, value: str, before: str = "", after: str = "") -> str:
        """Escape the characters of ``value`` that would read back as syntax.

        Every position matched by an unsafe pattern in scope gets one
        backslash, however many patterns match it.
        """
        positions = unsafe_positions(self._unsafe, self._stack, value, before, after)
        if not positions:
            return value
        parts: list[str] = []
        last = 0
        for index in positions:
            parts.append(value[last:index])
            parts.append("\\")
            last = index
        parts.append(value[last:])
        return "".join(parts)
