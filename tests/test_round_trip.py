"""Round-trip tests: serialize a tree, parse it back, get the same tree.

Trees are generated in the shape the parser produces: no empty or
adjacent text nodes, no whitespace at the edges of a paragraph, loose
lists with at least two items. Indented code may come back fenced, so
trees are compared with every code block in its fenced form.
"""

import string
from dataclasses import replace

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from footmark import (
    Document,
    FencedCode,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
    IndentedCode,
    List,
    ListItem,
    Markdown,
    Node,
    Paragraph,
    SerializeConfig,
    Text,
    ThematicBreak,
    normalize_identifier,
    parse,
    to_markdown,
)

labels = st.text(
    alphabet=string.ascii_letters + string.digits + " ]:^*_-", min_size=1, max_size=20
).filter(lambda label: normalize_identifier(label) != "")

words = st.text(
    alphabet=string.ascii_letters + string.digits + "[]^:\\`*_#-+.!<>&;~=)",
    min_size=1,
    max_size=8,
)
texts = st.lists(words, min_size=1, max_size=5).map(" ".join)
code_lines = st.lists(words, min_size=1, max_size=3).map(" ".join)

configs = pytest.mark.parametrize(
    "config", [SerializeConfig(), SerializeConfig(fences=False)], ids=["fences", "indents"]
)


@st.composite
def phrasing(draw, min_size: int = 1) -> tuple:
    parts = st.one_of(texts, labels.map(FootnoteReference.from_label))
    children: list = []
    for part in draw(st.lists(parts, min_size=min_size, max_size=4)):
        if isinstance(part, str) and children and isinstance(children[-1], Text):
            part = f"{children[-1].content} {part}"
            children.pop()
        children.append(Text(part) if isinstance(part, str) else part)
    return tuple(children)


def paragraphs() -> st.SearchStrategy[Paragraph]:
    return phrasing().map(lambda children: Paragraph(children=children))


headings = st.builds(
    Heading, level=st.sampled_from([1, 2, 3, 4, 5, 6]), children=phrasing(min_size=0)
)
fenced_codes = st.builds(
    FencedCode,
    code=st.lists(code_lines, max_size=3).map("\n".join),
    info=st.none() | st.text(alphabet=string.ascii_letters, min_size=1, max_size=5),
)
indented_codes = st.builds(
    IndentedCode, code=st.lists(code_lines, min_size=1, max_size=3).map("\n".join)
)
leaves = st.one_of(
    paragraphs(), headings, fenced_codes, indented_codes, st.just(ThematicBreak())
)


def blocks(depth: int, in_definition: bool = False) -> st.SearchStrategy[Node]:
    if depth <= 0:
        return leaves
    options = [leaves, lists(depth - 1, in_definition)]
    if not in_definition:
        options.append(definitions(depth - 1))
    return st.one_of(options)


def lists(depth: int, in_definition: bool = False) -> st.SearchStrategy[List]:
    tight = st.lists(
        paragraphs().map(lambda para: ListItem(children=(para,))), min_size=1, max_size=3
    ).map(lambda items: List(items=tuple(items)))
    loose = st.lists(
        st.lists(blocks(depth, in_definition), min_size=1, max_size=3).map(
            lambda children: ListItem(children=tuple(children))
        ),
        min_size=2,
        max_size=3,
    ).map(lambda items: List(items=tuple(items), tight=False))
    return tight | loose


@st.composite
def definitions(draw, depth: int = 1) -> FootnoteDefinition:
    label = draw(labels)
    children = draw(st.lists(blocks(depth, in_definition=True), max_size=3))
    return FootnoteDefinition.from_label(label, children=tuple(children))


documents = st.lists(blocks(2), max_size=4).map(lambda children: Document(children=tuple(children)))


def fence_code(node: Node) -> Node:
    """Rewrite every code block as fenced code without info."""
    match node:
        case IndentedCode():
            return FencedCode(code=node.code)
        case List():
            return replace(node, items=tuple(fence_code(item) for item in node.items))
        case Document() | FootnoteDefinition() | ListItem():
            return replace(node, children=tuple(fence_code(child) for child in node.children))
        case _:
            return node


class TestRoundTripExamples:
    """Sources that are already in canonical form come back unchanged."""

    @pytest.mark.parametrize(
        "source",
        [
            "[^a]\n",
            "a[^b]c\n",
            "[^a]:\n",
            "[^X\\]Y]:\n",
            "[^a]: b\n    c\n\n    d\n",
            "[^a]: ```\n    b\n    ```\n",
            "[^a]: b\n\n    ```\n    c\n    ```\n",
            "b^\\[a]\n",
            "b\\[^a]\n",
            "\\[a]: b\n",
            "[^a:b]:\n",
            "[^a]: *\n",
            "Text[^1].\n\n[^1]: The note.\n",
            "[^a]: * b\n    * c\n",
            "* [^a]: b\n\n* c\n",
            "[^a]: # b\n\n    ***\n",
            "- ***\n",
        ],
    )
    def test_canonical_source_is_stable(self, source: str) -> None:
        assert Markdown()(source) == source


class TestRoundTripProperties:
    """Generated trees survive serialize then parse."""

    @configs
    @given(doc=documents)
    @settings(max_examples=300, deadline=None)
    def test_tree_round_trip(self, config: SerializeConfig, doc: Document) -> None:
        assert fence_code(parse(to_markdown(doc, config=config))) == fence_code(doc)

    @given(st.lists(definitions(), min_size=1, max_size=3), st.lists(blocks(1), max_size=3))
    @settings(max_examples=200, deadline=None)
    def test_blocks_after_definitions_stay_outside(self, notes: list, rest: list) -> None:
        doc = Document(children=(*notes, *rest))
        config = SerializeConfig(fences=False)
        assert fence_code(parse(to_markdown(doc, config=config))) == fence_code(doc)

    @given(labels)
    @settings(max_examples=200)
    def test_reference_label_round_trip(self, label: str) -> None:
        node = Paragraph(children=(FootnoteReference.from_label(label),))
        (parsed,) = parse(to_markdown(node)).children
        assert parsed == node

    @given(labels)
    @settings(max_examples=200)
    def test_definition_label_round_trip(self, label: str) -> None:
        node = FootnoteDefinition.from_label(label)
        (parsed,) = parse(to_markdown(node)).children
        assert parsed.label == label
        assert parsed.identifier == normalize_identifier(label)

    @given(texts)
    @settings(max_examples=300)
    def test_text_never_becomes_syntax(self, text: str) -> None:
        node = Paragraph(children=(Text(text),))
        assert parse(to_markdown(node)).children == (node,)

    @configs
    @given(doc=documents)
    @settings(max_examples=100, deadline=None)
    def test_serialization_is_idempotent(self, config: SerializeConfig, doc: Document) -> None:
        once = to_markdown(doc, config=config)
        assert to_markdown(parse(once), config=config) == once
