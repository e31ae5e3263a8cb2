"""Plugin system for footmark.

Plugins bundle everything one piece of syntax needs:
- enable: switch recognition on in the parse configuration
- from_markdown: tree-building handlers for the lexer's events
- to_markdown: serializer handlers and escaping rules

Usage:
    >>> from footmark import Markdown
    >>> md = Markdown(plugins=["footnotes"])
    >>> md("Note[^a]")
    'Note[^a]\\n'

Built-in plugins:
- footnotes: [^label] calls and [^label]: definitions

Thread Safety:
All plugins are stateless. A fresh instance is created per lookup.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from footmark.errors import PluginError

if TYPE_CHECKING:
    from footmark.config import ParseConfig
    from footmark.parsing.builder import FromMarkdownExtension
    from footmark.serializing.state import ToMarkdownExtension

__all__ = [
    "BUILTIN_PLUGINS",
    "FootmarkPlugin",
    "get_plugin",
    "register_plugin",
    "resolve_plugins",
]


@runtime_checkable
class FootmarkPlugin(Protocol):
    """Protocol for footmark plugins.

    Thread Safety:
        Plugins must be stateless. All state should be in AST nodes.

    """

    @property
    def name(self) -> str:
        """Plugin identifier."""
        ...

    def enable(self, config: ParseConfig) -> ParseConfig:
        """Return ``config`` with this plugin's syntax switched on."""
        ...

    def from_markdown(self) -> FromMarkdownExtension:
        """Handlers building this plugin's nodes from lexer events."""
        ...

    def to_markdown(self) -> ToMarkdownExtension:
        """Handlers and unsafe patterns writing this plugin's nodes."""
        ...


# Registry of built-in plugins
BUILTIN_PLUGINS: dict[str, type[FootmarkPlugin]] = {}


def register_plugin(
    name: str,
) -> Callable[[type[FootmarkPlugin]], type[FootmarkPlugin]]:
    """Decorator to register a plugin.

    Usage:
        @register_plugin("footnotes")
        class FootnotesPlugin:
                ...

    """

    def decorator(cls: type[FootmarkPlugin]) -> type[FootmarkPlugin]:
        BUILTIN_PLUGINS[name] = cls
        return cls

    return decorator


def get_plugin(name: str) -> FootmarkPlugin:
    """Get a plugin instance by name.

    Raises:
        PluginError: If plugin name is not recognized

    """
    if name not in BUILTIN_PLUGINS:
        available = ", ".join(sorted(BUILTIN_PLUGINS.keys()))
        raise PluginError(name, f"unknown plugin. Available: {available}")
    return BUILTIN_PLUGINS[name]()


def resolve_plugins(names: Iterable[str]) -> list[FootmarkPlugin]:
    """Instantiate plugins by name, in order; ``"all"`` selects every built-in."""
    names = list(names)
    if "all" in names:
        names = list(BUILTIN_PLUGINS)
    seen: set[str] = set()
    plugins: list[FootmarkPlugin] = []
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        plugins.append(get_plugin(name))
    return plugins


# Import built-in plugins to register them
# These imports trigger the @register_plugin decorators
from footmark.plugins.footnotes import FootnotesPlugin  # noqa: E402

__all__ += ["FootnotesPlugin"]
