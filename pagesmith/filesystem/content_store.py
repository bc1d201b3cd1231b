"""Content store: the directory tree the generator writes into."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class ContentStore:
    """Reads and writes files below a content root.

    Paths are ``/``-separated and relative to ``content_dir``; a leading
    slash is ignored.
    """

    content_dir: Path

    def _validate_path(self, rel_path: str) -> Path:
        """Resolve *rel_path* inside the content directory.

        Raises ValueError if the resolved path escapes content_dir.
        """
        parts = [p for p in rel_path.split("/") if p]
        full_path = self.content_dir.joinpath(*parts).resolve()
        if not full_path.is_relative_to(self.content_dir.resolve()):
            raise ValueError(f"Path traversal detected: {rel_path}")
        return full_path

    def clean(self) -> None:
        """Remove everything below the content root and recreate it empty."""
        shutil.rmtree(self.content_dir, ignore_errors=True)
        self.content_dir.mkdir(parents=True, exist_ok=True)

    def ensure_directory(self, rel_path: str) -> Path:
        full_path = self._validate_path(rel_path)
        full_path.mkdir(parents=True, exist_ok=True)
        return full_path

    def dump_file(self, content: str, rel_path: str, extension: str) -> Path:
        """Write *content* to ``<rel_path>.<extension>``, creating parent folders."""
        full_path = self._validate_path(f"{rel_path}.{extension}")
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", full_path)
        return full_path

    def dump_json(self, data: Any, rel_path: str) -> Path:
        """Write *data* as compact JSON to ``<rel_path>.json``."""
        encoded = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        return self.dump_file(encoded, rel_path, "json")

    def read_json(self, rel_path: str) -> Any | None:
        """Read ``<rel_path>.json``. Returns None if the file does not exist."""
        full_path = self._validate_path(f"{rel_path}.json")
        if not full_path.is_file():
            return None
        return json.loads(full_path.read_text(encoding="utf-8"))
