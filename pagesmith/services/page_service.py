"""Dynamic page expansion and on-disk layout of generated pages."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pagesmith.exceptions import EndpointConfigError, PathValidationError
from pagesmith.schemas.page import SHOW_NEVER, EntityBinding, Page
from pagesmith.services.placeholder_service import (
    display_label,
    entity_def_from_path,
    has_dynamic_segment,
    resolve_with_entity,
    to_local_placeholders,
)

if TYPE_CHECKING:
    from pagesmith.filesystem.endpoints_config import EndpointDef, ResolveFn

logger = logging.getLogger(__name__)

PATH_CHECK_PATTERN = re.compile(r"[/:.a-z0-9_-]+")
INDEX_SEGMENT = "0.index"
HIDDEN_DIR_MARKER = "_dir"


@dataclass(frozen=True)
class DynamicPageResolver:
    """Entities of one type, fetched for the current language."""

    entity_name: str
    response: Any
    resolve: ResolveFn
    endpoint: EndpointDef | None = None

    @property
    def source(self) -> str:
        """Endpoint path the entities came from, for log messages."""
        return self.endpoint.path if self.endpoint is not None else "<inline response>"

    def entities(self) -> list[dict[str, Any]]:
        return [dict(entity) for entity in self.resolve(self.response)]


def register_resolver(
    resolvers: dict[str, DynamicPageResolver], resolver: DynamicPageResolver
) -> None:
    """Add *resolver* to *resolvers*, refusing a second one for the same entity."""
    if resolver.entity_name in resolvers:
        msg = f"A dynamic page resolver is already registered for entity {resolver.entity_name!r}"
        raise EndpointConfigError(msg)
    resolvers[resolver.entity_name] = resolver


def expand_page(page: Page, entity_name: str, entity: Mapping[str, Any]) -> Page:
    """Concrete copy of template *page* for one entity record."""
    return page.model_copy(
        update={
            "label": resolve_with_entity(page.label, entity_name, entity),
            "path": resolve_with_entity(page.path, entity_name, entity),
            "sorted_path": resolve_with_entity(page.sorted_path, entity_name, entity),
            "entity": EntityBinding(name=entity_name, value=dict(entity)),
        }
    )


def expand_pages(
    navigation: Sequence[Page], resolvers: Mapping[str, DynamicPageResolver]
) -> list[Page]:
    """Replace each dynamic page template by one page per resolved entity.

    Static pages pass through. Expanded pages take the template's position,
    in entity order. Templates without a resolver are kept once, flagged as
    still holding dynamic content.
    """
    pages: list[Page] = []
    for page in navigation:
        if not has_dynamic_segment(page.path):
            pages.append(page)
            continue

        entity_def = entity_def_from_path(page.path)
        resolver = resolvers.get(entity_def.name) if entity_def else None
        if resolver is None:
            logger.warning("No dynamic page resolver for %s, keeping template page", page.path)
            pages.append(page.model_copy(update={"has_dynamic_content": True}))
            continue

        entities = resolver.entities()
        logger.debug(
            "Expanding %s into %d page(s) from %s",
            page.path,
            len(entities),
            resolver.source,
        )
        pages.extend(expand_page(page, resolver.entity_name, entity) for entity in entities)
    return pages


def validate_page_path(path: str) -> None:
    """Raise PathValidationError unless *path* only uses allowed characters."""
    if not PATH_CHECK_PATTERN.fullmatch(path):
        raise PathValidationError(path, PATH_CHECK_PATTERN.pattern)


def is_path_extension(parent: str, child: str) -> bool:
    """Whether *child* lies strictly below *parent*, segment-wise."""
    return child != parent and child.startswith(parent.rstrip("/") + "/")


@dataclass(frozen=True)
class PageLayout:
    """Where a page lives in the content store."""

    local_sorted_path: str
    local_path: str
    is_directory: bool
    hidden_dir_marker: str | None
    public_path: str


def strip_sort_prefix(local_path: str, sort: int) -> str:
    """Public path for *local_path*: no index segment, no own sort prefix."""
    path = local_path.removesuffix(f"/{INDEX_SEGMENT}")
    head, _, last = path.rpartition("/")
    return f"{head}/{last.removeprefix(f'{sort + 1}.')}"


def layout_page(page: Page, next_page: Page | None) -> PageLayout:
    """Compute the on-disk layout of *page*.

    A page directly followed by one of its descendants becomes a directory
    page: its document is the folder's index, and a hidden page also gets a
    marker that keeps the folder out of the host's navigation.
    """
    local_sorted_path = to_local_placeholders(page.sorted_path)
    is_directory = next_page is not None and is_path_extension(
        page.sorted_path, next_page.sorted_path
    )
    local_path = f"{local_sorted_path}/{INDEX_SEGMENT}" if is_directory else local_sorted_path
    hidden_dir_marker = (
        f"{local_sorted_path}/{HIDDEN_DIR_MARKER}"
        if is_directory and page.show == SHOW_NEVER
        else None
    )
    return PageLayout(
        local_sorted_path=local_sorted_path,
        local_path=local_path,
        is_directory=is_directory,
        hidden_dir_marker=hidden_dir_marker,
        public_path=strip_sort_prefix(local_path, page.sort),
    )


def page_link(page: Page, layout: PageLayout) -> str:
    """Site index line for *page*."""
    return f"- [{display_label(page.label)}]({layout.public_path})"


def unwrap_content(payload: Any) -> dict[str, Any] | None:
    """Content record of a content endpoint response.

    Accepts the record itself, a ``{"contents": [...]}`` envelope, or an
    ``{"items": [...]}`` envelope whose first item either is the record or
    carries it under ``expand.Content``. JSON-encoded ``blocks`` are decoded
    so that entity substitution sees the block tree.
    """
    record = payload
    for envelope_key in ("items", "contents"):
        if isinstance(record, dict) and envelope_key in record:
            entries = record[envelope_key] or []
            record = entries[0] if entries else None
            break
    if isinstance(record, dict) and isinstance(record.get("expand"), dict):
        record = record["expand"].get("Content", record)
    if not isinstance(record, dict):
        return None
    blocks = record.get("blocks")
    if isinstance(blocks, str):
        record = {**record, "blocks": json.loads(blocks) if blocks.strip() else []}
    return record


def bind_entity(value: Any, binding: EntityBinding) -> Any:
    """Substitute *binding* into every string leaf of a decoded JSON value.

    A leaf that is exactly ``:<entity>`` becomes the whole entity record;
    other leaves get their ``:<entity>.<field>`` placeholders resolved.
    """
    if isinstance(value, str):
        if value == f":{binding.name}":
            return dict(binding.value)
        return resolve_with_entity(value, binding.name, binding.value)
    if isinstance(value, list):
        return [bind_entity(item, binding) for item in value]
    if isinstance(value, dict):
        return {key: bind_entity(item, binding) for key, item in value.items()}
    return value
