"""Tests for building footnote nodes from Markdown.

Node equality ignores locations, so whole trees are compared directly;
positions are checked separately where they matter.
"""

import pytest

from footmark import (
    CodeSpan,
    Document,
    FencedCode,
    FootnoteDefinition,
    FootnoteReference,
    FromMarkdownExtension,
    Heading,
    Lexer,
    List,
    ListItem,
    Paragraph,
    ParseConfig,
    SourceLocation,
    Text,
    TokenType,
    build,
    footnote_from_markdown,
    parse,
    parse_config_context,
)


def paragraph(*children) -> Paragraph:
    return Paragraph(children=tuple(children))


def ref(label: str) -> FootnoteReference:
    return FootnoteReference.from_label(label)


class TestFootnoteDefinition:
    """Test definitions and their content."""

    def test_lazy_and_indented_continuation(self) -> None:
        doc = parse("[^a]: b\nc\n\n    d")
        assert doc == Document(
            children=(
                FootnoteDefinition(
                    identifier="a",
                    label="a",
                    children=(paragraph(Text("b\nc")), paragraph(Text("d"))),
                ),
            )
        )

    def test_positions(self) -> None:
        doc = parse("[^a]: b\nc\n\n    d")
        (definition,) = doc.children
        first, second = definition.children

        assert definition.location == SourceLocation(1, 1, 0, 4, 6, 16)
        assert first.location == SourceLocation(1, 7, 6, 2, 2, 9)
        assert first.children[0].location == SourceLocation(1, 7, 6, 2, 2, 9)
        assert second.location == SourceLocation(4, 5, 15, 4, 6, 16)
        assert doc.location == SourceLocation(1, 1, 0, 4, 6, 16)

    def test_interrupts_paragraph(self) -> None:
        doc = parse("Call.[^a]\n[^a]: b")
        assert doc.children == (
            paragraph(Text("Call."), ref("a")),
            FootnoteDefinition.from_label("a", children=(paragraph(Text("b")),)),
        )
        call = doc.children[0].children[1]
        assert call.location == SourceLocation(1, 6, 5, 1, 10, 9)

    def test_empty_definition(self) -> None:
        (definition,) = parse("[^a]:").children
        assert definition == FootnoteDefinition(identifier="a", label="a")
        assert definition.location == SourceLocation(1, 1, 0, 1, 6, 5)

    def test_unindented_line_after_blank_ends_definition(self) -> None:
        doc = parse("[^a]: b\n\nc")
        assert doc.children == (
            FootnoteDefinition.from_label("a", children=(paragraph(Text("b")),)),
            paragraph(Text("c")),
        )

    def test_consecutive_definitions(self) -> None:
        doc = parse("[^a]: x\n[^b]: y")
        assert [child.identifier for child in doc.children] == ["a", "b"]

    def test_fenced_code_content(self) -> None:
        (definition,) = parse("[^a]:\n    ```\n    b\n    ```").children
        assert definition.children == (FencedCode(code="b"),)

    def test_list_content(self) -> None:
        (definition,) = parse("[^a]:\n    * b\n    * c").children
        assert definition.children == (
            List(
                items=(
                    ListItem(children=(paragraph(Text("b")),)),
                    ListItem(children=(paragraph(Text("c")),)),
                )
            ),
        )

    def test_list_on_marker_line(self) -> None:
        (definition,) = parse("[^a]: * b\n      c").children
        assert definition.children == (
            List(items=(ListItem(children=(paragraph(Text("b\nc")),)),)),
        )

    def test_colon_in_label(self) -> None:
        (definition,) = parse("[^a:b]:").children
        assert definition.identifier == "a:b"


class TestFootnoteReference:
    """Test calls and their identifiers."""

    def test_after_exclamation_mark(self) -> None:
        doc = parse("![^a]")
        assert doc.children == (paragraph(Text("!"), ref("a")),)
        assert doc.children[0].children[1].location == SourceLocation(1, 2, 1, 1, 6, 5)

    def test_identifier_is_normalized(self) -> None:
        (para,) = parse("[^Foo  Bar]").children
        (call,) = para.children
        assert call.identifier == "foo bar"
        assert call.label == "Foo  Bar"

    def test_escaped_bracket_resolved_in_label(self) -> None:
        (para,) = parse("[^X\\]Y]").children
        (call,) = para.children
        assert call.label == "X]Y"
        assert call.identifier == "x]y"

    def test_dangling_reference_is_kept(self) -> None:
        assert parse("[^missing]").children == (paragraph(ref("missing")),)

    def test_reference_inside_definition(self) -> None:
        (definition,) = parse("[^a]: see [^b]").children
        assert definition.children == (paragraph(Text("see "), ref("b")),)

    def test_plugin_disabled(self) -> None:
        doc = parse("[^a]: b [^c]", plugins=())
        assert doc.children == (paragraph(Text("[^a]: b [^c]")),)

    @pytest.mark.parametrize("source", ["[^]", "[^ ]", "[^a[b]", "\\[^a]"])
    def test_not_a_reference(self, source: str) -> None:
        (para,) = parse(source).children
        assert all(isinstance(child, Text) for child in para.children)

    def test_code_span_hides_reference(self) -> None:
        assert parse("`[^a]`").children == (paragraph(CodeSpan("[^a]")),)


class TestGenericBlocks:
    """Test the blocks surrounding footnotes."""

    def test_heading(self) -> None:
        assert parse("## Hi[^a]").children == (
            Heading(level=2, children=(Text("Hi"), ref("a"))),
        )

    def test_tight_list(self) -> None:
        (bullet_list,) = parse("* a\n* b").children
        assert bullet_list.tight
        assert len(bullet_list.items) == 2

    def test_loose_list(self) -> None:
        (bullet_list,) = parse("* a\n\n* b").children
        assert not bullet_list.tight

    def test_different_bullets_start_new_list(self) -> None:
        assert len(parse("* a\n- b").children) == 2

    def test_empty_source(self) -> None:
        doc = parse("")
        assert doc.children == ()
        assert doc.location == SourceLocation(1, 1, 0, 1, 1, 0)

    def test_source_file(self) -> None:
        doc = parse("[^a]", source_file="notes.md")
        assert doc.children[0].children[0].location.source_file == "notes.md"


class TestCustomExtension:
    """Extensions passed to build() replace footnote handlers."""

    def test_calls_as_plain_text(self) -> None:
        def exit_call(ctx, token) -> None:
            ctx.append(Text(f"({token.location.offset})", location=token.location))

        def ignore(ctx, token) -> None:
            pass

        extension = FromMarkdownExtension(
            enter={TokenType.FOOTNOTE_CALL: ignore, TokenType.FOOTNOTE_CALL_STRING: ignore},
            exit={TokenType.FOOTNOTE_CALL: exit_call, TokenType.FOOTNOTE_CALL_STRING: ignore},
        )
        with parse_config_context(ParseConfig(footnotes_enabled=True)):
            events = list(Lexer("a[^b]").tokenize())
        doc = build(events, [extension])
        assert doc.children == (paragraph(Text("a"), Text("(1)")),)

    def test_label_string_fills_enclosing_node(self) -> None:
        """Label strings open no frame of their own; the call gets the label."""
        extension = footnote_from_markdown()
        assert set(extension.enter) == set(extension.exit)
        with parse_config_context(ParseConfig(footnotes_enabled=True)):
            events = list(Lexer("[^A b]").tokenize())
        (para,) = build(events, [extension]).children
        assert para.children == (FootnoteReference(identifier="a b", label="A b"),)
