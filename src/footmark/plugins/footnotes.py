"""Footnotes plugin for footmark.

Adds support for footnote references and definitions.

Syntax:
Reference: [^label]
Definition: [^label]: Content here

Multi-line definitions:
[^note]: First paragraph of footnote,
lazily continued.

    Second paragraph, indented four spaces.

Labels are matched case-insensitively with whitespace collapsed:
[^Note 1] and [^note   1] share the identifier "note 1".

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from dataclasses import replace

from footmark.config import ParseConfig
from footmark.footnotes import footnote_from_markdown, footnote_to_markdown
from footmark.parsing.builder import FromMarkdownExtension
from footmark.plugins import register_plugin
from footmark.serializing.state import ToMarkdownExtension


@register_plugin("footnotes")
class FootnotesPlugin:
    """Plugin adding [^label] footnote support."""

    @property
    def name(self) -> str:
        return "footnotes"

    def enable(self, config: ParseConfig) -> ParseConfig:
        """Enable footnote detection in the lexer."""
        return replace(config, footnotes_enabled=True)

    def from_markdown(self) -> FromMarkdownExtension:
        return footnote_from_markdown()

    def to_markdown(self) -> ToMarkdownExtension:
        return footnote_to_markdown()
