"""Serialization of CMS content blocks to MDC (markdown components) markup."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pagesmith.schemas.block import Block, ComponentBlock, PageContent, ParagraphBlock, RawBlock

if TYPE_CHECKING:
    from pagesmith.services.placeholder_service import EntityDef

DYNAMIC_CONTENT_COMPONENT = "hc-dynamic-content"
PARAGRAPH_COMPONENT = "block-p"

# Component names starting with the key are renamed to start with the value.
COMPONENT_ALIASES: dict[str, str] = {"session": "event"}

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NUMBER_PREFIX_RE = re.compile(r"^\s*[+-]?\d")


def pascal_to_kebab(name: str) -> str:
    """Convert ``SessionCard`` to ``session-card``."""
    return _CAMEL_BOUNDARY_RE.sub("-", name).lower()


def component_name(block_type: str) -> str:
    name = pascal_to_kebab(block_type)
    for prefix, replacement in COMPONENT_ALIASES.items():
        if name.startswith(prefix):
            return replacement + name.removeprefix(prefix)
    return name


def fence(depth: int) -> str:
    return ":" * (depth + 2)


def indent(depth: int) -> str:
    return "  " * depth


def _is_structured(value: Any) -> bool:
    return value is None or isinstance(value, (Mapping, list, tuple))


def is_boolean_or_number(value: Any) -> bool:
    """Whether *value* should be passed to the renderer as a bare literal.

    Matches booleans, numbers and strings that are ``true``/``false`` in any
    case or that start with an integer.
    """
    if _is_structured(value):
        return False
    if isinstance(value, (bool, int, float)):
        return True
    text = str(value)
    return text.lower() in ("true", "false") or bool(_NUMBER_PREFIX_RE.match(text))


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_props(props: Mapping[str, Any]) -> str:
    """Render component props as an MDC attribute block, or ``""`` when empty."""
    parts: list[str] = []
    for key, value in props.items():
        if _is_structured(value):
            encoded = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
            parts.append(f":{key}='{encoded}'")
        elif is_boolean_or_number(value):
            parts.append(f":{key}={_literal(value)}")
        else:
            parts.append(f'{key}="{value}"')
    return "{" + " ".join(parts) + "}" if parts else ""


def serialize_block(block: Block, depth: int = 0) -> list[str]:
    """Serialize one block (and its subtree) to markup lines."""
    if isinstance(block, RawBlock):
        return [block.text] if block.text else []
    if isinstance(block, ParagraphBlock):
        return [
            f"{indent(depth)}{fence(depth)}{PARAGRAPH_COMPONENT}",
            f"{indent(depth + 1)}{block.text}",
            f"{indent(depth)}{fence(depth)}",
        ]
    if isinstance(block, ComponentBlock):
        return _serialize_component(block, depth)
    raise TypeError(f"Unsupported block: {block!r}")


def _serialize_component(block: ComponentBlock, depth: int) -> list[str]:
    name = component_name(block.type)
    props = format_props(block.props)
    if block.is_inline:
        return [f"{indent(depth)}:{name}{props}"]

    lines = [f"{indent(depth)}{fence(depth)}{name}{props}"]
    for child in block.children:
        lines.extend(serialize_block(child, depth + 1))
    lines.append(f"{indent(depth)}{fence(depth)}")
    return lines


def json_to_mdc(content: PageContent | None, entity_def: EntityDef | None = None) -> str | None:
    """Serialize page content to an MDC document.

    Returns None when there is nothing to publish: no content record, a
    record that is not in the ``published`` state, or no blocks. When
    *entity_def* is given, the document is wrapped in an hc-dynamic-content
    component so the renderer can substitute the entity late.
    """
    if content is None or not content.is_published or not content.blocks:
        return None

    lines: list[str] = []
    if entity_def is not None:
        lines.append(
            f"{fence(0)}{DYNAMIC_CONTENT_COMPONENT}"
            f'{{entity="{entity_def.name}" field="{entity_def.field}"}}'
        )

    for block in content.blocks:
        lines.extend(serialize_block(block))

    if entity_def is not None:
        lines.append(fence(0))

    return "\n".join(lines)
