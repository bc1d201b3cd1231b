"""Content language lookups."""

from __future__ import annotations

import html
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pagesmith.schemas.page import Lang

if TYPE_CHECKING:
    from pagesmith.config import Settings
    from pagesmith.filesystem.content_store import ContentStore


@dataclass
class SiteLanguages:
    langs: list[Lang] = field(default_factory=list)

    @property
    def default_lang(self) -> Lang | None:
        return next((lang for lang in self.langs if lang.is_default), None)

    @property
    def lang_codes(self) -> list[str]:
        return [lang.code for lang in self.langs]

    @staticmethod
    def current_lang_code(route_path: str) -> str:
        """Language code of a route: its first path segment."""
        parts = route_path.split("/")
        return parts[1] if len(parts) > 1 else ""

    def current_lang(self, route_path: str) -> Lang | None:
        code = self.current_lang_code(route_path)
        return next((lang for lang in self.langs if lang.code == code), self.default_lang)


def render_default_redirect(langs: Sequence[Lang]) -> str:
    """HTML page redirecting the site root to the default language.

    Raises ValueError if no language is marked as default.
    """
    default = SiteLanguages(list(langs)).default_lang
    if default is None:
        raise ValueError("No default language defined")
    target = html.escape(f"/{default.code}", quote=True)
    return (
        '<!DOCTYPE html><html><head><meta http-equiv="refresh" '
        f'content="0; url={target}"/></html>'
    )


def load_languages(store: ContentStore, settings: Settings) -> SiteLanguages:
    """Languages from the content store's ``langs.json`` mirror."""
    raw_langs = store.read_json(settings.api_path("langs")) or []
    return SiteLanguages([Lang.model_validate(raw) for raw in raw_langs])
