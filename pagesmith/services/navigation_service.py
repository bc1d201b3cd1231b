"""Navigation tree reconstruction from the flat page list of a language."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pagesmith.exceptions import NavigationOrderError
from pagesmith.schemas.page import NavigationItem, Page
from pagesmith.services.page_service import is_path_extension

if TYPE_CHECKING:
    from pagesmith.config import Settings
    from pagesmith.filesystem.content_store import ContentStore

logger = logging.getLogger(__name__)

_DYNAMIC_SEGMENT_RE = re.compile(r":([^/]+)")


def is_first_level(page: Page) -> bool:
    """Whether *page* sits directly under its language root (``/<lang>/<page>``)."""
    return page.path.count("/") == 2


def has_child(page: Page, next_page: Page) -> bool:
    return next_page.path != page.path and is_path_extension(page.path, next_page.path)


def build_navigation(pages: Sequence[Page], strict: bool = False) -> list[NavigationItem]:
    """Rebuild the navigation forest from a depth-first, path-sorted page list.

    The first page is the language home page and is not part of the forest.
    The list is walked once with one page of lookahead: a page followed by
    one of its descendants becomes the current parent, and a page outside
    the current parent climbs back to the closest enclosing ancestor.

    The sort order is trusted. With *strict*, a page whose parent was seen
    earlier but is no longer open raises NavigationOrderError instead of
    being attached at the wrong level.
    """
    forest: list[NavigationItem] = []
    ancestors: list[NavigationItem] = []
    seen: set[str] = set()
    entries = list(pages[1:])

    for index, page in enumerate(entries):
        next_page = entries[index + 1] if index + 1 < len(entries) else None

        if is_first_level(page):
            ancestors.clear()
        while ancestors and not is_path_extension(ancestors[-1].path, page.path):
            ancestors.pop()

        if strict and not is_first_level(page):
            parent_path = page.path.rsplit("/", 1)[0]
            if parent_path in seen and (not ancestors or ancestors[-1].path != parent_path):
                msg = f"Page {page.path} does not directly follow its parent {parent_path}"
                raise NavigationOrderError(msg)
        seen.add(page.path)

        item = NavigationItem.from_page(page)
        if ancestors:
            parent = ancestors[-1]
            if parent.children is None:
                parent.children = []
            parent.children.append(item)
        else:
            forest.append(item)

        if next_page is not None and has_child(page, next_page):
            ancestors.append(item)

    return forest


def _strip_trailing_slash(path: str) -> str:
    return path[:-1] if path.endswith("/") else path


@dataclass
class SiteNavigation:
    """Navigation and page lookups for one language."""

    home_page: NavigationItem | None = None
    navigation: list[NavigationItem] = field(default_factory=list)
    pages: dict[str, Page] = field(default_factory=dict)

    @classmethod
    def from_pages(cls, pages: Sequence[Page], strict: bool = False) -> SiteNavigation:
        if not pages:
            return cls()
        return cls(
            home_page=NavigationItem.from_page(pages[0]),
            navigation=build_navigation(pages, strict=strict),
            pages={str(page.id if page.id is not None else page.path): page for page in pages},
        )

    def get_page_by_path(self, path: str) -> Page | None:
        wanted = _strip_trailing_slash(path)
        return next(
            (p for p in self.pages.values() if _strip_trailing_slash(p.path) == wanted),
            None,
        )

    def get_page_by_name(self, name: str) -> Page | None:
        return next((p for p in self.pages.values() if p.name == name), None)

    def resolve_page(self, route_path: str) -> Page | None:
        """Find the page serving *route_path*, matching dynamic templates.

        A template like ``/en/cities/:city.slug`` serves ``/en/cities/geneva``;
        the returned copy carries ``label="geneva"`` and
        ``resolve_slug="city.slug=geneva"``.
        """
        static_page = self.get_page_by_path(route_path)
        if static_page is not None:
            return static_page

        route_parent = route_path[: route_path.rfind("/")] + "/:"
        for page in self.pages.values():
            match = _DYNAMIC_SEGMENT_RE.search(page.path)
            if match is None or match.start() == 0:
                continue
            if route_parent != page.path.replace(match.group(0), ":", 1):
                continue
            value = route_path[match.start() :]
            if not value:
                continue
            return page.model_copy(
                update={"label": value, "resolve_slug": f"{match.group(1)}={value}"}
            )
        return None


def load_site_navigation(store: ContentStore, settings: Settings, lang_code: str) -> SiteNavigation:
    """Build the navigation of *lang_code* from the content store's navigation mirror."""
    raw_pages = store.read_json(settings.api_path(lang_code, "navigation"))
    if not raw_pages:
        logger.warning("No navigation found for language %s", lang_code)
        return SiteNavigation()
    return SiteNavigation.from_pages([Page.model_validate(raw) for raw in raw_pages])
