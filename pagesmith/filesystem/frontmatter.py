"""YAML front matter for generated page documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypedDict

import frontmatter
import yaml

from pagesmith.schemas.page import SHOW_ALWAYS

if TYPE_CHECKING:
    from pagesmith.schemas.page import Page

DEFAULT_ACCESS = "all"


class PageFrontmatter(TypedDict, total=False):
    navigation: bool
    access: str
    apiUrl: str


def build_frontmatter(page: Page, api_url: str) -> PageFrontmatter:
    """Front matter fields for *page*, in output order."""
    metadata: PageFrontmatter = {}
    if page.show != SHOW_ALWAYS:
        metadata["navigation"] = False
    metadata["access"] = page.access or DEFAULT_ACCESS
    metadata["apiUrl"] = api_url
    return metadata


def render_document(metadata: PageFrontmatter, body: str) -> str:
    """Serialize front matter followed by *body* into a markdown document."""
    post = frontmatter.Post(body, **metadata)
    return str(frontmatter.dumps(post, sort_keys=False)) + "\n"


def render_hidden_dir_marker() -> str:
    """Content of the ``_dir.yml`` file that hides a folder from navigation."""
    return yaml.safe_dump({"navigation": False}, default_flow_style=False)
