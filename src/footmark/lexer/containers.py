"""Container stack for block scanning.

Footnote definitions and list items are containers: each one claims a
minimum indentation for the lines that continue it. The lexer keeps the
open containers on a stack, innermost last, and checks every new line
against them from the outside in.

Usage:
    stack = ContainerStack(origin)  # Initializes with DOCUMENT frame

    stack.push(ContainerFrame(
        container_type=ContainerType.FOOTNOTE_DEFINITION,
        start=marker_point,
        content_indent=4,
    ))

    frame = stack.pop()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from footmark.location import Point


class ContainerType(Enum):
    """Types of block-level containers."""

    DOCUMENT = auto()  # Root container
    FOOTNOTE_DEFINITION = auto()  # [^label]: content, continued by 4-space indent
    LIST = auto()  # Run of bullet items sharing one bullet character
    LIST_ITEM = auto()  # One bullet item


@dataclass(slots=True)
class ContainerFrame:
    """A frame on the container stack.

    Attributes:
        container_type: The type of container
        start: Where the container's marker starts
        content_indent: Absolute column continuation lines must reach
        end: End of the last content consumed by the container
        bullet: For lists and items, the bullet character
        is_loose: For lists, whether blank lines separate items or blocks
        saw_blank_line: For items, a blank line was seen since the last block
        pending_blank: For lists, the previous item ended with blank lines
        has_content: For items, at least one block has started inside

    """

    container_type: ContainerType
    start: Point
    content_indent: int = 0
    end: Point | None = None
    bullet: str = ""

    # Looseness bookkeeping for lists
    is_loose: bool = False
    saw_blank_line: bool = False
    pending_blank: bool = False
    has_content: bool = False

    def __post_init__(self) -> None:
        if self.end is None:
            self.end = self.start

    def continues(self, column: int, blank: bool) -> bool:
        """Does a line whose content starts at ``column`` continue this container?

        Lists never decide on their own: they stay open as long as one of
        their items does, or a sibling item starts.
        """
        if self.container_type in (ContainerType.DOCUMENT, ContainerType.LIST):
            return True
        return blank or column >= self.content_indent


@dataclass
class ContainerStack:
    """Manages the stack of open containers during scanning.

    Invariant: frames[0] is always DOCUMENT, frames[-1] is innermost container.

    """

    origin: Point
    _stack: list[ContainerFrame] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Initialize with DOCUMENT frame."""
        self._stack = [ContainerFrame(container_type=ContainerType.DOCUMENT, start=self.origin)]

    @property
    def frames(self) -> list[ContainerFrame]:
        return self._stack

    @property
    def top(self) -> ContainerFrame:
        return self._stack[-1]

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, frame: ContainerFrame) -> None:
        """Push a new container; its marker counts as content of every ancestor."""
        assert frame.end is not None
        self.touch(frame.end)
        self._stack.append(frame)

    def pop(self) -> ContainerFrame:
        """Pop the innermost container.

        An item that ended on blank lines marks its list, so a following
        sibling item makes the list loose.

        Raises:
            ValueError: If attempting to pop the document frame
        """
        if len(self._stack) <= 1:
            raise ValueError("Cannot pop document frame")

        frame = self._stack.pop()
        parent = self._stack[-1]
        if (
            frame.container_type == ContainerType.LIST_ITEM
            and parent.container_type == ContainerType.LIST
            and frame.saw_blank_line
        ):
            parent.pending_blank = True
        return frame

    def touch(self, end: Point) -> None:
        """Record ``end`` as the end of content for every open container."""
        for frame in self._stack:
            frame.end = end

    def mark_blank_line(self) -> None:
        """Record a blank line inside every open list item."""
        for frame in self._stack:
            if frame.container_type == ContainerType.LIST_ITEM:
                frame.saw_blank_line = True

    def note_block_start(self) -> None:
        """A new block or item is about to start inside the innermost container.

        Applies the looseness rules: blank lines between two blocks of an
        item, or between two items, make the list loose.
        """
        parent = self.top
        if parent.container_type == ContainerType.LIST_ITEM:
            if parent.saw_blank_line and parent.has_content:
                self._stack[-2].is_loose = True
            parent.saw_blank_line = False
            parent.has_content = True
        elif parent.container_type == ContainerType.LIST:
            if parent.pending_blank:
                parent.is_loose = True
            parent.pending_blank = False
