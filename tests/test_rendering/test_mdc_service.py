"""Tests for block parsing and MDC serialization."""

from __future__ import annotations

import string

from hypothesis import given, settings
from hypothesis import strategies as st

from pagesmith.schemas.block import (
    ComponentBlock,
    PageContent,
    ParagraphBlock,
    RawBlock,
    parse_blocks,
    parse_content,
)
from pagesmith.services.mdc_service import (
    component_name,
    format_props,
    is_boolean_or_number,
    json_to_mdc,
    pascal_to_kebab,
    serialize_block,
)
from pagesmith.services.placeholder_service import EntityDef

_TYPE_NAME = st.text(alphabet=string.ascii_letters, min_size=1, max_size=10).map(str.capitalize)


def _published(*blocks: ComponentBlock | RawBlock | ParagraphBlock) -> PageContent:
    return PageContent(state="published", blocks=blocks)


class TestParseBlocks:
    def test_untyped_block_is_raw(self) -> None:
        assert parse_blocks([{"text": "<p>hi</p>"}]) == (RawBlock(text="<p>hi</p>"),)

    def test_paragraph(self) -> None:
        assert parse_blocks([{"type": "paragraph", "data": {"text": "Hello"}}]) == (
            ParagraphBlock(text="Hello"),
        )

    def test_component_with_children(self) -> None:
        (block,) = parse_blocks(
            [
                {
                    "type": "Grid",
                    "data": {"props": {"columns": 2}},
                    "children": [{"type": "Card"}],
                }
            ]
        )
        assert block == ComponentBlock(
            type="Grid", props={"columns": 2}, children=(ComponentBlock(type="Card"),)
        )

    def test_json_string_blocks(self) -> None:
        assert parse_blocks('[{"text": "a"}]') == (RawBlock(text="a"),)
        assert parse_blocks("") == ()
        assert parse_blocks(None) == ()

    def test_non_mapping_props_ignored(self) -> None:
        (block,) = parse_blocks([{"type": "Card", "data": {"props": ["x"]}}])
        assert block == ComponentBlock(type="Card")

    def test_parse_content(self) -> None:
        content = parse_content({"state": "published", "blocks": [{"text": "a"}]})
        assert content == PageContent(state="published", blocks=(RawBlock(text="a"),))
        assert parse_content(None) is None
        assert parse_content({}) is None


class TestComponentNames:
    def test_pascal_to_kebab(self) -> None:
        assert pascal_to_kebab("SessionCard") == "session-card"
        assert pascal_to_kebab("Hero") == "hero"
        assert pascal_to_kebab("HTMLBlock") == "html-block"
        assert pascal_to_kebab("Grid2Column") == "grid2-column"

    def test_session_alias(self) -> None:
        assert component_name("SessionCard") == "event-card"
        assert component_name("Session") == "event"
        assert component_name("SpeakerSession") == "speaker-session"


class TestProps:
    def test_literal_detection(self) -> None:
        assert is_boolean_or_number(True)
        assert is_boolean_or_number(3)
        assert is_boolean_or_number("42")
        assert is_boolean_or_number("FALSE")
        assert is_boolean_or_number("12px")
        assert not is_boolean_or_number("hello")
        assert not is_boolean_or_number({"a": 1})
        assert not is_boolean_or_number(None)

    def test_format_props(self) -> None:
        props = {
            "title": "Hi there",
            "count": "3",
            "visible": True,
            "tags": ["a", "b"],
            "meta": {"k": 1},
        }
        assert format_props(props) == (
            '{title="Hi there" :count=3 :visible=true '
            """:tags='["a","b"]' :meta='{"k":1}'}"""
        )

    def test_null_prop_is_json(self) -> None:
        assert format_props({"image": None}) == "{:image='null'}"

    def test_no_props(self) -> None:
        assert format_props({}) == ""


class TestSerializeBlock:
    def test_inline_component(self) -> None:
        block = ComponentBlock(type="SessionCard", props={"title": "Keynote"})
        assert serialize_block(block) == [':event-card{title="Keynote"}']

    def test_inline_component_indented_by_depth(self) -> None:
        assert serialize_block(ComponentBlock(type="Card"), depth=2) == ["    :card"]

    def test_container_component(self) -> None:
        block = ComponentBlock(
            type="Grid",
            props={"columns": 2},
            children=(ComponentBlock(type="Card"), RawBlock(text="Some *text*")),
        )
        assert serialize_block(block) == [
            "::grid{:columns=2}",
            "  :card",
            "Some *text*",
            "::",
        ]

    def test_nested_containers_fence_by_depth(self) -> None:
        block = ComponentBlock(
            type="Grid",
            children=(ComponentBlock(type="Column", children=(ComponentBlock(type="Card"),)),),
        )
        assert serialize_block(block) == [
            "::grid",
            "  :::column",
            "    :card",
            "  :::",
            "::",
        ]

    def test_paragraph(self) -> None:
        assert serialize_block(ParagraphBlock(text="Hello")) == ["::block-p", "  Hello", "::"]
        assert serialize_block(ParagraphBlock(text="Hi"), depth=1) == [
            "  :::block-p",
            "    Hi",
            "  :::",
        ]

    def test_empty_raw_block_emits_nothing(self) -> None:
        assert serialize_block(RawBlock(text="")) == []

    @settings(max_examples=100, deadline=None)
    @given(
        name=_TYPE_NAME,
        child_names=st.lists(_TYPE_NAME, min_size=1, max_size=6),
        depth=st.integers(min_value=0, max_value=4),
    )
    def test_container_lines(self, name: str, child_names: list[str], depth: int) -> None:
        block = ComponentBlock(
            type=name, children=tuple(ComponentBlock(type=c) for c in child_names)
        )
        lines = serialize_block(block, depth)
        assert len(lines) == len(child_names) + 2
        opening, closing = lines[0].strip(), lines[-1].strip()
        assert closing == ":" * (depth + 2)
        assert opening.startswith(closing)
        assert not opening.startswith(closing + ":")
        for line in lines[1:-1]:
            assert line.startswith("  " * (depth + 1) + ":")


class TestJsonToMdc:
    def test_published_document(self) -> None:
        content = _published(RawBlock(text="# Title"), ComponentBlock(type="Hero"))
        assert json_to_mdc(content) == "# Title\n:hero"

    def test_unpublished_yields_nothing(self) -> None:
        content = PageContent(state="draft", blocks=(RawBlock(text="x"),))
        assert json_to_mdc(content) is None

    def test_missing_content_yields_nothing(self) -> None:
        assert json_to_mdc(None) is None

    def test_no_blocks_yields_nothing(self) -> None:
        assert json_to_mdc(_published()) is None
        assert json_to_mdc(_published(), EntityDef(name="city", field="slug")) is None

    def test_dynamic_content_wrapper(self) -> None:
        content = _published(ComponentBlock(type="CityCard", props={"name": ":city.name"}))
        assert json_to_mdc(content, EntityDef(name="city", field="slug")) == (
            '::hc-dynamic-content{entity="city" field="slug"}\n'
            ':city-card{name=":city.name"}\n'
            "::"
        )

    @settings(max_examples=100, deadline=None)
    @given(
        state=st.text(max_size=12).filter(lambda s: s != "published"),
        texts=st.lists(st.text(min_size=1, max_size=20), max_size=5),
    )
    def test_any_unpublished_state_yields_nothing(self, state: str, texts: list[str]) -> None:
        content = PageContent(state=state, blocks=tuple(RawBlock(text=t) for t in texts))
        assert json_to_mdc(content) is None
