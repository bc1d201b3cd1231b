"""Content generation: CMS API to static content store."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pagesmith.filesystem.endpoints_config import validate_endpoint_name
from pagesmith.filesystem.frontmatter import (
    build_frontmatter,
    render_document,
    render_hidden_dir_marker,
)
from pagesmith.schemas.block import parse_content
from pagesmith.schemas.page import Lang, Page
from pagesmith.services.mdc_service import json_to_mdc
from pagesmith.services.page_service import (
    DynamicPageResolver,
    bind_entity,
    expand_pages,
    layout_page,
    page_link,
    register_resolver,
    unwrap_content,
    validate_page_path,
)
from pagesmith.services.placeholder_service import entity_def_from_path, resolve_placeholders

if TYPE_CHECKING:
    from pagesmith.api_client import ContentApiClient
    from pagesmith.config import Settings
    from pagesmith.filesystem.content_store import ContentStore
    from pagesmith.filesystem.endpoints_config import EndpointDef

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """Summary of a generation run."""

    languages: list[str] = field(default_factory=list)
    pages_written: list[str] = field(default_factory=list)
    pages_skipped: list[str] = field(default_factory=list)
    directory_pages: list[str] = field(default_factory=list)
    page_links: list[str] = field(default_factory=list)


def response_items(payload: Any) -> list[Any]:
    """Items of a list response or of an ``{"items": [...]}`` envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        items: list[Any] = payload["items"]
        return items
    return []


def filter_labels(payload: Any, excluded_prefixes: Sequence[str]) -> dict[str, Any]:
    """Flatten a labels response to ``{key: value}`` without excluded keys.

    Accepts a plain mapping or a list (possibly enveloped) of
    ``{"key": ..., "value": ...}`` records.
    """
    if isinstance(payload, dict) and "items" not in payload:
        pairs = list(payload.items())
    else:
        pairs = [(item["key"], item.get("value")) for item in response_items(payload)]
    prefixes = tuple(excluded_prefixes)
    return {key: value for key, value in pairs if not str(key).startswith(prefixes)}


class ContentGenerator:
    """Writes the content store for every language the CMS exposes.

    Pages are processed strictly in navigation order: whether a page is laid
    out as a directory depends on the page that follows it.
    """

    def __init__(
        self,
        settings: Settings,
        client: ContentApiClient,
        store: ContentStore,
        endpoints: Mapping[str, EndpointDef] | None = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.store = store
        self.endpoints = dict(endpoints or {})
        for name in self.endpoints:
            validate_endpoint_name(name)

    def generate(self) -> GenerationReport:
        """Regenerate the whole content store."""
        logger.info(
            'Generating content from %s into "%s"...',
            self.client.base_url,
            self.store.content_dir,
        )
        self.store.clean()

        langs = response_items(self.client.fetch(self.settings.langs_endpoint).json)
        self.store.dump_json(langs, self.settings.api_path("langs"))

        report = GenerationReport()
        for raw_lang in langs:
            lang = Lang.model_validate(raw_lang)
            self.generate_language(lang, report)

        self.store.dump_file("\n".join(report.page_links), "index", "md")
        logger.info(
            "Content generation done! %d page(s) written, %d skipped",
            len(report.pages_written),
            len(report.pages_skipped),
        )
        return report

    def generate_language(self, lang: Lang, report: GenerationReport) -> None:
        logger.info("Generating language %s", lang.code)
        report.languages.append(lang.code)
        context = {"lang": lang}
        self.store.ensure_directory(lang.code)

        labels_payload = self.client.fetch(
            resolve_placeholders(self.settings.labels_endpoint, context)
        ).json
        labels = filter_labels(labels_payload, self.settings.excluded_label_prefixes)
        self.store.dump_json(labels, self.settings.api_path(lang.code, "labels"))

        navigation_payload = self.client.fetch(
            resolve_placeholders(self.settings.navigation_endpoint, context)
        ).json
        navigation = response_items(navigation_payload)
        self.store.dump_json(navigation, self.settings.api_path(lang.code, "navigation"))

        resolvers = self.fetch_custom_endpoints(lang)
        pages = [Page.model_validate(item) for item in navigation]
        self.build_pages(pages, lang, resolvers, report)

    def fetch_custom_endpoints(self, lang: Lang) -> dict[str, DynamicPageResolver]:
        """Mirror custom endpoints for *lang* and collect their page resolvers."""
        context = {"lang": lang}
        resolvers: dict[str, DynamicPageResolver] = {}
        for name, endpoint in self.endpoints.items():
            result = self.client.fetch(
                resolve_placeholders(endpoint.path, context),
                resolve_placeholders(endpoint.query_params, context),
            )
            self.store.dump_json(result.json, self.settings.api_path(lang.code, name))

            if endpoint.resolver is not None:
                register_resolver(
                    resolvers,
                    DynamicPageResolver(
                        entity_name=endpoint.resolver.entity_name,
                        response=result.json,
                        resolve=endpoint.resolver.resolve,
                        endpoint=endpoint,
                    ),
                )
        return resolvers

    def build_pages(
        self,
        navigation: Sequence[Page],
        lang: Lang,
        resolvers: Mapping[str, DynamicPageResolver],
        report: GenerationReport,
    ) -> list[Page]:
        """Expand, lay out, fetch and write every page of one language."""
        pages = expand_pages(navigation, resolvers)

        for index, page in enumerate(pages):
            validate_page_path(page.path)
            next_page = pages[index + 1] if index + 1 < len(pages) else None
            layout = layout_page(page, next_page)

            context = {"page": page, "lang": lang}
            result = self.client.fetch(
                resolve_placeholders(self.settings.content_endpoint, context),
                resolve_placeholders(self.settings.content_query_params, context),
            )
            record = unwrap_content(result.json)
            if record is not None and page.entity is not None:
                record = bind_entity(record, page.entity)

            if layout.hidden_dir_marker is not None:
                self.store.dump_file(render_hidden_dir_marker(), layout.hidden_dir_marker, "yml")
            if layout.is_directory:
                report.directory_pages.append(layout.local_path)

            entity_def = entity_def_from_path(page.path) if page.has_dynamic_content else None
            body = json_to_mdc(parse_content(record), entity_def)
            if body is None:
                logger.debug("Skipping %s: no published content", page.path)
                report.pages_skipped.append(layout.local_path)
            else:
                document = render_document(build_frontmatter(page, result.url), body)
                self.store.dump_file(document, layout.local_path, "md")
                report.pages_written.append(layout.local_path)

            report.page_links.append(page_link(page, layout))

        return pages
