"""pagesmith: static content store generation from a headless CMS."""

__version__ = "0.1.0"
