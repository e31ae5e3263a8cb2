"""Markdown serialization of footmark trees.

The serializer walks a tree with one handler per node class. Escaping is
driven by tables of UnsafePattern, so every extension declares the
characters its syntax makes special.

Usage:
    >>> from footmark.nodes import Paragraph, Text
    >>> serialize(Paragraph(children=(Text("a"),)))
    'a\\n'

"""

from __future__ import annotations

from collections.abc import Iterable

from footmark.config import SerializeConfig
from footmark.nodes import Node
from footmark.serializing.handlers import CORE_TO_MARKDOWN
from footmark.serializing.state import Info, SerializerState, ToMarkdownExtension
from footmark.serializing.unsafe import UnsafePattern, compile_pattern, unsafe_positions
from footmark.utils.logger import get_logger

logger = get_logger(__name__)


def serialize(
    node: Node,
    extensions: Iterable[ToMarkdownExtension] = (),
    config: SerializeConfig | None = None,
) -> str:
    """Serialize ``node`` to Markdown.

    Core handlers come first; extensions add or replace handlers. Non-empty
    output always ends with a single line ending.

    Raises:
        SerializeError: If a node cannot be written
    """
    state = SerializerState(config or SerializeConfig(), [CORE_TO_MARKDOWN, *extensions])
    logger.debug("Serializing %s", type(node).__name__)
    result = state.handle(node)
    if result and not result.endswith("\n"):
        result += "\n"
    return result


__all__ = [
    "CORE_TO_MARKDOWN",
    "Info",
    "SerializerState",
    "ToMarkdownExtension",
    "UnsafePattern",
    "compile_pattern",
    "serialize",
    "unsafe_positions",
]
