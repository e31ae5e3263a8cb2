"""
footmark — Markdown footnotes, parsed and written back.

Reads ``[^label]`` footnote calls and ``[^label]: ...`` definitions into a
typed AST, and serializes trees back to Markdown that reads the same
again. Zero runtime dependencies.

Quick Start:
    >>> from footmark import parse, to_markdown
    >>> doc = parse("Text[^1].\\n\\n[^1]: The note.")
    >>> doc.children[1].identifier
    '1'
    >>> to_markdown(doc)
    'Text[^1].\\n\\n[^1]: The note.\\n'

    >>> # Or use the high-level Markdown class
    >>> from footmark import Markdown
    >>> md = Markdown()
    >>> md("[^A]:   b")
    '[^A]: b\\n'

Building trees by hand:
    >>> from footmark import FootnoteReference
    >>> to_markdown(FootnoteReference(label="X]Y"))
    '[^X\\\\]Y]\\n'

"""

from collections.abc import Iterable

from footmark.config import (
    ParseConfig,
    SerializeConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from footmark.errors import ConfigError, FootmarkError, ParseError, PluginError, SerializeError
from footmark.footnotes import footnote_from_markdown, footnote_to_markdown
from footmark.identifiers import normalize_identifier, unescape_label
from footmark.lexer import Lexer
from footmark.location import Point, SourceLocation
from footmark.nodes import (
    Block,
    CodeSpan,
    Document,
    FencedCode,
    FootnoteDefinition,
    FootnoteNode,
    FootnoteReference,
    Heading,
    IndentedCode,
    Inline,
    List,
    ListItem,
    Node,
    Paragraph,
    Text,
    ThematicBreak,
)
from footmark.parsing import FromMarkdownExtension, build
from footmark.plugins import FootmarkPlugin, resolve_plugins
from footmark.serializing import ToMarkdownExtension, UnsafePattern, serialize
from footmark.tokens import Event, EventKind, Token, TokenType

__version__ = "0.1.0"

DEFAULT_PLUGINS: tuple[str, ...] = ("footnotes",)


def parse(
    source: str,
    *,
    plugins: Iterable[str] = DEFAULT_PLUGINS,
    source_file: str | None = None,
    config: ParseConfig | None = None,
) -> Document:
    """Parse Markdown source into a typed AST.

    Args:
        source: Markdown source text
        plugins: Names of the plugins to enable (``"all"`` for every one)
        source_file: Optional source file path for node locations
        config: Base parse configuration; plugins switch their syntax on
            on top of it

    Returns:
        Document AST root node

    Example:
        >>> doc = parse("[^Note]: b")
        >>> doc.children[0].identifier, doc.children[0].label
        ('note', 'Note')

    """
    return _parse(source, resolve_plugins(plugins), source_file, config)


def _parse(
    source: str,
    plugins: list[FootmarkPlugin],
    source_file: str | None,
    config: ParseConfig | None,
) -> Document:
    parse_config = config or ParseConfig()
    for plugin in plugins:
        parse_config = plugin.enable(parse_config)

    # Config reaches the lexer through a ContextVar, restored afterwards
    with parse_config_context(parse_config):
        events = Lexer(source, source_file=source_file).tokenize()
        return build(events, [plugin.from_markdown() for plugin in plugins], source_file)


def to_markdown(
    node: Node,
    *,
    plugins: Iterable[str] = DEFAULT_PLUGINS,
    config: SerializeConfig | None = None,
    extensions: Iterable[ToMarkdownExtension] = (),
) -> str:
    """Serialize a tree (or any single node) to Markdown.

    Args:
        node: Root of the tree to write
        plugins: Names of the plugins whose nodes may appear in the tree
        config: Output style options
        extensions: Extra serializer extensions, applied after the plugins'

    Raises:
        SerializeError: If a node cannot be written

    Example:
        >>> to_markdown(FootnoteDefinition(identifier="a:b"))
        '[^a:b]:\\n'

    """
    return _to_markdown(node, resolve_plugins(plugins), config, extensions)


def _to_markdown(
    node: Node,
    plugins: list[FootmarkPlugin],
    config: SerializeConfig | None,
    extensions: Iterable[ToMarkdownExtension] = (),
) -> str:
    return serialize(
        node,
        [*(plugin.to_markdown() for plugin in plugins), *extensions],
        config,
    )


class Markdown:
    """High-level processor combining parser and serializer.

    Usage:
        >>> md = Markdown()
        >>> md("[^a]: b\\nc")
        '[^a]: b\\n    c\\n'

        >>> # Access the AST
        >>> doc = md.parse("Call[^a]")
        >>> doc.children[0].children[1].identifier
        'a'

    Thread Safety:
        Uses ContextVar for per-call parse configuration. Safe to use one
        instance from several threads.

    """

    __slots__ = ("_plugins", "_parse_config", "_serialize_config")

    def __init__(
        self,
        *,
        plugins: Iterable[str] = DEFAULT_PLUGINS,
        parse_config: ParseConfig | None = None,
        serialize_config: SerializeConfig | None = None,
    ) -> None:
        """Initialize Markdown processor.

        Args:
            plugins: Plugin names to enable. Use ["all"] for every built-in.
            parse_config: Base parse configuration
            serialize_config: Output style options
        """
        self._plugins = resolve_plugins(plugins)
        self._parse_config = parse_config
        self._serialize_config = serialize_config

    def __call__(self, source: str) -> str:
        """Parse and write back ``source``, normalizing its formatting."""
        return self.serialize(self.parse(source))

    def parse(self, source: str, *, source_file: str | None = None) -> Document:
        """Parse Markdown source into a typed AST."""
        return _parse(source, self._plugins, source_file, self._parse_config)

    def serialize(self, node: Node) -> str:
        """Serialize a tree to Markdown."""
        return _to_markdown(node, self._plugins, self._serialize_config)

    @property
    def plugins(self) -> tuple[str, ...]:
        return tuple(plugin.name for plugin in self._plugins)


__all__ = [
    "DEFAULT_PLUGINS",
    # Nodes
    "Block",
    "CodeSpan",
    "Document",
    "FencedCode",
    "FootnoteDefinition",
    "FootnoteNode",
    "FootnoteReference",
    "Heading",
    "IndentedCode",
    "Inline",
    "List",
    "ListItem",
    "Node",
    "Paragraph",
    "Text",
    "ThematicBreak",
    # Locations and tokens
    "Event",
    "EventKind",
    "Point",
    "SourceLocation",
    "Token",
    "TokenType",
    # Configuration
    "ParseConfig",
    "SerializeConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
    # Errors
    "ConfigError",
    "FootmarkError",
    "ParseError",
    "PluginError",
    "SerializeError",
    # Extensions and plugins
    "FootmarkPlugin",
    "FromMarkdownExtension",
    "ToMarkdownExtension",
    "UnsafePattern",
    "footnote_from_markdown",
    "footnote_to_markdown",
    # Processing
    "Lexer",
    "Markdown",
    "__version__",
    "build",
    "normalize_identifier",
    "parse",
    "serialize",
    "to_markdown",
    "unescape_label",
]
