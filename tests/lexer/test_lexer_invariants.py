"""Property-based tests for lexer invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from footmark.config import ParseConfig, parse_config_context
from footmark.lexer import Lexer
from footmark.tokens import Event, EventKind, TokenType

# Markdown-heavy alphabet so generated text hits the interesting paths
markdown_text = st.text(alphabet="[]^:\\`*-+#~ \t\nab1.", max_size=200)


def lex(source: str) -> list[Event]:
    with parse_config_context(ParseConfig(footnotes_enabled=True)):
        return list(Lexer(source).tokenize())


class TestEventStreamInvariants:
    """Test invariants of the event stream."""

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_arbitrary_text_never_crashes(self, source: str) -> None:
        events = lex(source)
        assert events[0].token.type == TokenType.DOCUMENT
        assert events[-1].token.type == TokenType.DOCUMENT

    @given(markdown_text)
    @settings(max_examples=300)
    def test_events_are_well_nested(self, source: str) -> None:
        """Every EXIT closes the innermost open ENTER of the same type."""
        open_types: list[TokenType] = []
        for event in lex(source):
            if event.kind == EventKind.ENTER:
                open_types.append(event.token.type)
            else:
                assert open_types, f"EXIT {event.token.type.name} with nothing open"
                assert open_types.pop() == event.token.type
        assert open_types == []

    @given(markdown_text)
    @settings(max_examples=300)
    def test_spans_lie_within_source(self, source: str) -> None:
        for event in lex(source):
            token = event.token
            assert 0 <= token.start.offset <= token.end.offset <= len(source)
            assert token.start.line >= 1
            assert token.start.column >= 1

    @given(markdown_text)
    @settings(max_examples=200)
    def test_document_covers_source(self, source: str) -> None:
        events = lex(source)
        assert events[0].token.start.offset == 0
        assert events[-1].token.end.offset == len(source)

    @given(markdown_text)
    @settings(max_examples=200)
    def test_label_strings_sit_inside_their_construct(self, source: str) -> None:
        events = lex(source)
        for index, event in enumerate(events):
            if event.token.type in (
                TokenType.FOOTNOTE_CALL_STRING,
                TokenType.FOOTNOTE_DEFINITION_LABEL_STRING,
            ):
                parent = events[index - 1] if event.kind == EventKind.ENTER else events[index - 2]
                assert parent.token.type in (
                    TokenType.FOOTNOTE_CALL,
                    TokenType.FOOTNOTE_DEFINITION,
                )
                assert parent.token.start.offset + 2 == event.token.start.offset

    @given(markdown_text)
    @settings(max_examples=100)
    def test_tokenization_is_deterministic(self, source: str) -> None:
        assert lex(source) == lex(source)
