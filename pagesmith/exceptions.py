"""Application-level exception types.

Convention:
- ``ValueError`` subclasses below are configuration or input problems. They
  abort a generation run; the CLI logs them and exits with status 1.
- Transport and decoding errors raised by ``httpx`` are never wrapped; they
  propagate to the caller as-is.
- Gaps that have a defined fallback (missing dynamic page resolver,
  unpublished content) are logged, not raised.
"""

from __future__ import annotations


class PathValidationError(ValueError):
    """Raised when a page path contains characters outside the allowed set."""

    def __init__(self, path: str, pattern: str) -> None:
        self.path = path
        self.pattern = pattern
        super().__init__(
            f"Page path {path} contains invalid character(s) => path check pattern: {pattern}"
        )


class EndpointConfigError(ValueError):
    """Raised for an invalid custom endpoint or dynamic page resolver definition."""


class NavigationOrderError(ValueError):
    """Raised in strict mode when a page list is not sorted depth-first by path."""
