"""Typed AST nodes for footmark.

All AST nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: Safe sharing across threads
- Pattern matching: match statements work naturally

Node Hierarchy:
Node (base)
├── Block (block-level elements)
│   ├── Document
│   ├── Paragraph
│   ├── Heading
│   ├── FencedCode
│   ├── IndentedCode
│   ├── ThematicBreak
│   ├── List
│   ├── ListItem
│   └── FootnoteDefinition
└── Inline (inline elements)
    ├── Text
    ├── CodeSpan
    └── FootnoteReference

Every node has an optional ``location``. Parsed trees always carry one;
trees assembled by hand usually do not, and nothing in footmark requires
it.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from footmark.identifiers import normalize_identifier
from footmark.location import SourceLocation

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class Node:
    """Base class for all AST nodes."""

    location: SourceLocation | None = field(default=None, compare=False)


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text content.

    Soft line breaks stay inside the content as ``\\n``.

    """

    content: str


@dataclass(frozen=True, slots=True)
class CodeSpan(Node):
    """Inline code.

    Markdown: `code`

    """

    code: str


@dataclass(frozen=True, slots=True)
class FootnoteReference(Node):
    """Footnote reference (call site).

    Markdown: [^note]

    ``identifier`` is the normalized key shared with the matching
    definition; ``label`` is the text as written. Either may be left empty
    when building a tree by hand, but not both.

    """

    identifier: str = ""
    label: str | None = None

    @classmethod
    def from_label(cls, label: str, location: SourceLocation | None = None) -> FootnoteReference:
        """Create a reference whose identifier is derived from ``label``."""
        return cls(identifier=normalize_identifier(label), label=label, location=location)

    @property
    def association_id(self) -> str:
        """Text used to write the node back out: the label, else the identifier."""
        return self.label or self.identifier


# PEP 695 type alias for inline elements
type Inline = Text | CodeSpan | FootnoteReference


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph block.

    Markdown: Text separated by blank lines

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """ATX heading.

    Markdown: ## Heading

    """

    level: Literal[1, 2, 3, 4, 5, 6]
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class FencedCode(Node):
    """Fenced code block.

    Markdown: ```lang\\ncode\\n```

    """

    code: str
    info: str | None = None


@dataclass(frozen=True, slots=True)
class IndentedCode(Node):
    """Indented code block (4+ spaces).

    Markdown: ····code

    """

    code: str


@dataclass(frozen=True, slots=True)
class ThematicBreak(Node):
    """Thematic break.

    Markdown: *** or --- or ___

    """


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """Bullet list item.

    Markdown: * item

    """

    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True)
class List(Node):
    """Bullet list.

    A tight list has no blank lines between its items or inside them.

    """

    items: tuple[ListItem, ...]
    tight: bool = True


@dataclass(frozen=True, slots=True)
class FootnoteDefinition(Node):
    """Footnote definition.

    Markdown:
        [^note]: First paragraph.

            Second paragraph, indented four spaces.

    Only valid where block content is allowed.

    """

    identifier: str = ""
    label: str | None = None
    children: tuple[Block, ...] = ()

    @classmethod
    def from_label(
        cls,
        label: str,
        children: tuple[Block, ...] = (),
        location: SourceLocation | None = None,
    ) -> FootnoteDefinition:
        """Create a definition whose identifier is derived from ``label``."""
        return cls(
            identifier=normalize_identifier(label),
            label=label,
            children=children,
            location=location,
        )

    @property
    def association_id(self) -> str:
        """Text used to write the node back out: the label, else the identifier."""
        return self.label or self.identifier


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root document node.

    Contains all top-level blocks in the document.

    """

    children: tuple[Block, ...]


# PEP 695 type alias for block elements
type Block = (
    Document
    | Paragraph
    | Heading
    | FencedCode
    | IndentedCode
    | ThematicBreak
    | List
    | ListItem
    | FootnoteDefinition
)

# The closed set of footnote node kinds. Footnote handlers match on it
# exhaustively, so adding a kind here forces every handler to be updated.
type FootnoteNode = FootnoteDefinition | FootnoteReference
