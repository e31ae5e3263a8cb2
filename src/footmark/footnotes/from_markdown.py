"""Tree building for footnote calls and definitions.

Turns the footnote events of the lexer into FootnoteReference and
FootnoteDefinition nodes. Label tokens carry the label as written; the
node gets the label with ``\\]`` resolved and the identifier normalized
from it.

The lexer only emits footnote events for labels it has validated, so
these handlers never fail.
"""

from __future__ import annotations

from footmark.identifiers import normalize_identifier, unescape_label
from footmark.nodes import FootnoteDefinition, FootnoteReference
from footmark.parsing.builder import BuildContext, FromMarkdownExtension
from footmark.tokens import Token, TokenType


def _enter_call(ctx: BuildContext, token: Token) -> None:
    ctx.enter_node(FootnoteReference, token, children_field=None, identifier="", label=None)


def _enter_definition(ctx: BuildContext, token: Token) -> None:
    ctx.enter_node(FootnoteDefinition, token, identifier="", label=None)


def _enter_label_string(ctx: BuildContext, token: Token) -> None:
    """Nothing to open; the exit handler sets the label on the enclosing node."""


def _exit_label_string(ctx: BuildContext, token: Token) -> None:
    label = unescape_label(token.value)
    fields = ctx.current.fields
    fields["label"] = label
    fields["identifier"] = normalize_identifier(label)


def _close(ctx: BuildContext, token: Token) -> None:
    ctx.exit_node(token)


def footnote_from_markdown() -> FromMarkdownExtension:
    """Create the extension that builds footnote nodes from lexer events.

    Example:
        >>> from footmark.parsing import build
        >>> doc = build(events, [footnote_from_markdown()])  # doctest: +SKIP

    """
    return FromMarkdownExtension(
        enter={
            TokenType.FOOTNOTE_CALL: _enter_call,
            TokenType.FOOTNOTE_CALL_STRING: _enter_label_string,
            TokenType.FOOTNOTE_DEFINITION: _enter_definition,
            TokenType.FOOTNOTE_DEFINITION_LABEL_STRING: _enter_label_string,
        },
        exit={
            TokenType.FOOTNOTE_CALL: _close,
            TokenType.FOOTNOTE_CALL_STRING: _exit_label_string,
            TokenType.FOOTNOTE_DEFINITION: _close,
            TokenType.FOOTNOTE_DEFINITION_LABEL_STRING: _exit_label_string,
        },
    )
