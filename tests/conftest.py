"""Shared test fixtures for pagesmith."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pagesmith.config import Settings
from pagesmith.filesystem.content_store import ContentStore

if TYPE_CHECKING:
    from pathlib import Path

TEST_API_BASE_URL = "http://cms.test/api"


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Content root inside the temporary directory (not created yet)."""
    return tmp_path / "content"


@pytest.fixture
def test_settings(content_dir: Path) -> Settings:
    """Settings pointing at the fake CMS and the temporary content root."""
    return Settings(
        _env_file=None,
        api_base_url=TEST_API_BASE_URL,
        content_dir=content_dir,
    )


@pytest.fixture
def store(content_dir: Path) -> ContentStore:
    return ContentStore(content_dir=content_dir)
