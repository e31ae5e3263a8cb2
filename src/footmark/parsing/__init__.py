"""Tree building from lexer events.

The builder turns the flat enter/exit event stream into the typed AST.
Syntax extensions contribute handlers through FromMarkdownExtension.
"""

from footmark.parsing.builder import (
    CORE_EXTENSION,
    BuildContext,
    FromMarkdownExtension,
    OpenNode,
    build,
)

__all__ = [
    "CORE_EXTENSION",
    "BuildContext",
    "FromMarkdownExtension",
    "OpenNode",
    "build",
]
