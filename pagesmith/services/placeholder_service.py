"""Placeholder substitution for endpoint templates and entity-bound pages.

Two token syntaxes are handled here:

- ``{a.b.c}``: a dotted lookup into an arbitrary values context, used for
  endpoint paths and query parameter templates.
- ``:entity.field``: a reference to a field of a CMS entity record, used in
  dynamic page paths, labels and page content.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+(?:\.\w+)*)\}")
ENTITY_PLACEHOLDER_PATTERN = re.compile(r":(\w+)\.(\w+)")
_LABEL_ENTITY_PATTERN = re.compile(r":(\w+)\.")


@dataclass(frozen=True)
class EntityDef:
    """An ``entity.field`` reference extracted from a dynamic path."""

    name: str
    field: str


def stringify(value: Any) -> str:
    """Render a context value the way it appears inside a URL or markup text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def lookup(values: Any, dotted_path: str) -> Any:
    """Return the value at *dotted_path* in *values*, or ``None`` if absent.

    Mappings are traversed by key, anything else by attribute.
    """
    current = values
    for part in dotted_path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
    return current


def _replace_in_string(template: str, values: Any) -> str:
    return PLACEHOLDER_PATTERN.sub(lambda m: stringify(lookup(values, m.group(1))), template)


def resolve_placeholders(template: str | Mapping[str, str] | None, values: Any) -> str:
    """Substitute ``{a.b}`` tokens in a path template or a query parameter mapping.

    A string template is returned with every token replaced (missing values
    become empty strings). A mapping is rendered as a ``?k=v&k2=v2`` query
    string in which keys whose value resolves empty are left out.
    """
    if not template:
        return ""
    if isinstance(template, Mapping):
        pairs: list[str] = []
        for key, raw_value in template.items():
            replaced = _replace_in_string(str(raw_value), values)
            if not replaced:
                continue
            pairs.append(f"{key}={replaced}")
        return "?" + "&".join(pairs) if pairs else ""
    return _replace_in_string(template, values)


def resolve_with_entity(text: str, entity_name: str, entity: Mapping[str, Any]) -> str:
    """Replace every ``:entity_name.field`` in *text* with the entity's field value.

    Placeholders naming another entity are left as they are. Fields missing
    from the record resolve to an empty string.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group(1) != entity_name:
            return match.group(0)
        return stringify(entity.get(match.group(2)))

    return ENTITY_PLACEHOLDER_PATTERN.sub(_replace, text)


def has_dynamic_segment(path: str) -> bool:
    """Whether *path* contains at least one ``:entity.field`` style segment."""
    return ":" in path


def entity_def_from_path(path: str) -> EntityDef | None:
    """Extract the entity reference from the dynamic segments of *path*.

    When several segments reference entities, the last one wins so that a
    page is bound to a single entity.
    """
    entity_def: EntityDef | None = None
    for segment in path.split("/"):
        if ":" not in segment:
            continue
        reference = segment.split(":", 1)[1]
        name, _, field = reference.partition(".")
        entity_def = EntityDef(name=name, field=field)
    return entity_def


def to_local_placeholders(path: str) -> str:
    """Rewrite ``:entity.field`` segments to filesystem-safe ``__entity.field__``."""
    return ENTITY_PLACEHOLDER_PATTERN.sub(r"__\1.\2__", path)


def display_label(label: str) -> str:
    """Rewrite a label's ``:entity.`` references to ``__entity__.`` for the site index."""
    return _LABEL_ENTITY_PATTERN.sub(r"__\1__.", label)
