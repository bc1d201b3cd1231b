"""HTTP client for the CMS content API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    json: Any
    url: str


class ContentApiClient:
    """Synchronous JSON client for the content API.

    Errors are not retried: non-2xx responses raise ``httpx.HTTPStatusError``
    and undecodable bodies raise ``json.JSONDecodeError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> ContentApiClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def fetch(self, path: str, query: str = "") -> FetchResult:
        """GET ``base_url + path + query`` and decode the JSON body."""
        url = f"{self.base_url}{path}{query}"
        logger.debug("GET %s", url)
        resp = self.client.get(url)
        resp.raise_for_status()
        return FetchResult(json=resp.json(), url=url)
