"""Typed representation of CMS rich-content blocks.

The CMS sends an open-ended ``{type, data, children}`` shape. It is parsed
into one of a closed set of variants so that serialization can match on
every kind explicitly.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

PARAGRAPH_TYPE = "paragraph"


@dataclass(frozen=True)
class RawBlock:
    """Untyped block whose text is emitted verbatim."""

    text: str


@dataclass(frozen=True)
class ParagraphBlock:
    """A paragraph of rich text."""

    text: str


@dataclass(frozen=True)
class ComponentBlock:
    """A typed component with optional props and nested children."""

    type: str
    props: dict[str, Any] = field(default_factory=dict)
    children: tuple[Block, ...] = ()

    @property
    def is_inline(self) -> bool:
        return not self.children


Block = RawBlock | ParagraphBlock | ComponentBlock


@dataclass(frozen=True)
class PageContent:
    """The content record of a page."""

    state: str
    blocks: tuple[Block, ...] = ()

    @property
    def is_published(self) -> bool:
        return self.state == "published"


def parse_block(raw: Mapping[str, Any]) -> Block:
    """Parse one raw block mapping into its typed variant."""
    block_type = raw.get("type")
    data = raw.get("data") or {}

    if not block_type:
        return RawBlock(text=str(raw.get("text") or ""))

    if block_type == PARAGRAPH_TYPE and "text" in data:
        return ParagraphBlock(text=str(data.get("text") or ""))

    props = data.get("props") or {}
    if not isinstance(props, Mapping):
        logger.warning("Ignoring non-mapping props on %s block: %r", block_type, props)
        props = {}

    return ComponentBlock(
        type=str(block_type),
        props=dict(props),
        children=tuple(parse_block(child) for child in raw.get("children") or []),
    )


def parse_blocks(raw_blocks: Sequence[Mapping[str, Any]] | str | None) -> tuple[Block, ...]:
    """Parse a block list, accepting the JSON-encoded string form as well."""
    if raw_blocks is None:
        return ()
    if isinstance(raw_blocks, str):
        raw_blocks = json.loads(raw_blocks) if raw_blocks.strip() else []
    return tuple(parse_block(raw) for raw in raw_blocks)


def parse_content(raw: Mapping[str, Any] | None) -> PageContent | None:
    """Parse a raw content record. Returns None when there is no record."""
    if not raw:
        return None
    return PageContent(
        state=str(raw.get("state") or ""),
        blocks=parse_blocks(raw.get("blocks")),
    )
