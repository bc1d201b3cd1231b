"""Generator configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Label keys with this prefix belong to the CMS admin and are never published.
RESERVED_LABEL_PREFIX = "hc_"


class Settings(BaseSettings):
    """pagesmith settings.

    A single instance is built per run and passed explicitly to every
    component that needs it.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGESMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Core
    debug: bool = False

    # Content API
    api_base_url: str = "http://localhost:8090/api"
    request_timeout: float = Field(default=30.0, gt=0)

    # Paths
    content_dir: Path = Path("./content")
    api_base_path: str = "_hc/api"
    endpoints_file: Path | None = None

    # Labels
    exclude_label_key_prefixes: list[str] = Field(default_factory=list)

    # Endpoint templates ({lang.*} and {page.*} placeholders are resolved per call)
    langs_endpoint: str = "/hc/langs"
    labels_endpoint: str = "/hc/langs/{lang.code}/labels"
    navigation_endpoint: str = "/hc/langs/{lang.code}/navigation"
    content_endpoint: str = "/hc/pages/{page.id}/content"
    content_query_params: dict[str, str] = Field(default_factory=dict)

    @property
    def excluded_label_prefixes(self) -> list[str]:
        """Label key prefixes dropped from ``labels.json``."""
        return [RESERVED_LABEL_PREFIX, *self.exclude_label_key_prefixes]

    def api_path(self, *parts: str) -> str:
        """Join *parts* under the API mirror directory of the content store."""
        return "/".join([self.api_base_path.strip("/"), *parts])
