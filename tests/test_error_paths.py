"""Tests for the errors raised when input trees or event streams are invalid."""

from dataclasses import dataclass

import pytest

from footmark import (
    Document,
    FootmarkError,
    FootnoteDefinition,
    FootnoteReference,
    Node,
    Paragraph,
    ParseError,
    Point,
    PluginError,
    SerializeError,
    Text,
    Token,
    TokenType,
    build,
    parse,
    to_markdown,
)
from footmark.tokens import enter, exit_


@dataclass(frozen=True, slots=True)
class Custom(Node):
    """A node class nothing knows how to write."""


def token(token_type: TokenType, value: str = "") -> Token:
    return Token.spanning(token_type, value, Point(1, 1, 0), Point(1, 2, 1))


class TestSerializeErrors:
    """Test SerializeError on trees that cannot be written."""

    def test_reference_without_label_or_identifier(self) -> None:
        with pytest.raises(SerializeError, match="FootnoteReference"):
            to_markdown(FootnoteReference())

    def test_definition_without_label_or_identifier(self) -> None:
        with pytest.raises(SerializeError, match="FootnoteDefinition"):
            to_markdown(FootnoteDefinition(label=""))

    def test_nested_empty_reference(self) -> None:
        node = Paragraph(children=(Text("a"), FootnoteReference()))
        with pytest.raises(SerializeError) as excinfo:
            to_markdown(node)
        assert excinfo.value.node == FootnoteReference()

    def test_unknown_node_class(self) -> None:
        with pytest.raises(SerializeError, match="no to-markdown handler"):
            to_markdown(Custom())

    def test_footnote_without_plugin(self) -> None:
        with pytest.raises(SerializeError, match="no to-markdown handler"):
            to_markdown(FootnoteReference(identifier="a"), plugins=())

    def test_is_footmark_error(self) -> None:
        with pytest.raises(FootmarkError):
            to_markdown(FootnoteReference())


class TestBuildErrors:
    """Test ParseError from the tree builder."""

    def test_missing_handler(self) -> None:
        doc = token(TokenType.DOCUMENT)
        call = token(TokenType.FOOTNOTE_CALL)
        with pytest.raises(ParseError, match="No enter handler for FOOTNOTE_CALL"):
            build([enter(doc), enter(call), exit_(call), exit_(doc)])

    def test_mismatched_exit(self) -> None:
        doc = token(TokenType.DOCUMENT)
        para = token(TokenType.PARAGRAPH)
        with pytest.raises(ParseError, match="Cannot close DOCUMENT while PARAGRAPH is open"):
            build([enter(doc), enter(para), exit_(doc)])

    def test_unclosed_frame(self) -> None:
        doc = token(TokenType.DOCUMENT)
        with pytest.raises(ParseError, match="Unclosed DOCUMENT"):
            build([enter(doc)])

    def test_empty_stream(self) -> None:
        with pytest.raises(ParseError, match="did not produce a document"):
            build([])

    def test_exit_without_enter(self) -> None:
        with pytest.raises(ParseError, match="No node is open"):
            build([exit_(token(TokenType.DOCUMENT))])

    def test_core_stream_builds(self) -> None:
        doc = token(TokenType.DOCUMENT)
        text = token(TokenType.TEXT, "a")
        para = token(TokenType.PARAGRAPH)
        events = [enter(doc), enter(para), enter(text), exit_(text), exit_(para), exit_(doc)]
        assert build(events) == Document(children=(Paragraph(children=(Text("a"),)),))


class TestParseErrorMessage:
    """Test location formatting of ParseError."""

    def test_full_location(self) -> None:
        error = ParseError("bad", lineno=3, col_offset=5, source_file="a.md")
        assert str(error) == "a.md:3:5 bad"
        assert error.message == "bad"

    def test_line_only(self) -> None:
        assert str(ParseError("bad", lineno=3)) == "3 bad"

    def test_no_location(self) -> None:
        assert str(ParseError("bad")) == "bad"

    def test_location_in_build_error(self) -> None:
        doc = token(TokenType.DOCUMENT)
        para = token(TokenType.PARAGRAPH)
        with pytest.raises(ParseError) as excinfo:
            build([enter(doc), enter(para)], source_file="notes.md")
        assert str(excinfo.value).startswith("notes.md:1:1 ")


class TestPluginErrors:
    """Test PluginError for unknown plugin names."""

    def test_unknown_plugin_in_parse(self) -> None:
        with pytest.raises(PluginError, match="Plugin 'tables': unknown plugin"):
            parse("a", plugins=["tables"])

    def test_available_plugins_listed(self) -> None:
        with pytest.raises(PluginError, match="Available: footnotes") as excinfo:
            to_markdown(Document(children=()), plugins=["nope"])
        assert excinfo.value.plugin_name == "nope"
