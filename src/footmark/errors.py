"""Exception classes for footmark.

Provides standardized exceptions for error handling throughout footmark.
"""

from __future__ import annotations


class FootmarkError(Exception):
    """Base exception for all footmark errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(FootmarkError):
    """Error while building a tree from an event stream.

    Raised when the event stream handed to the tree builder is not well
    nested, or contains a token kind no registered extension handles.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class SerializeError(FootmarkError):
    """Error while turning a tree back into Markdown.

    Raised for precondition failures (a footnote node with neither label
    nor identifier) and for node kinds no handler is registered for.
    """

    def __init__(self, message: str, node: object | None = None) -> None:
        self.node = node
        if node is not None:
            message = f"{type(node).__name__}: {message}"
        super().__init__(message)


class ConfigError(FootmarkError):
    """Invalid parse or serialize configuration value."""

    pass


class PluginError(FootmarkError):
    """Error in plugin lookup or initialization."""

    def __init__(self, plugin_name: str, message: str) -> None:
        """Initialize plugin error.

        Args:
            plugin_name: Name of the failing plugin
            message: Description of the error
        """
        self.plugin_name = plugin_name
        super().__init__(f"Plugin '{plugin_name}': {message}")
