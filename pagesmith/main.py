"""Command line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx

from pagesmith.api_client import ContentApiClient
from pagesmith.config import Settings
from pagesmith.filesystem.content_store import ContentStore
from pagesmith.filesystem.endpoints_config import parse_endpoints_config
from pagesmith.services.generate_service import ContentGenerator
from pagesmith.services.lang_service import load_languages, render_default_redirect
from pagesmith.services.navigation_service import load_site_navigation

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_settings(args: argparse.Namespace) -> Settings:
    """Settings from the environment, overridden by command line options."""
    overrides: dict[str, Any] = {}
    if args.debug:
        overrides["debug"] = True
    if args.content_dir:
        overrides["content_dir"] = Path(args.content_dir)
    if getattr(args, "api_url", None):
        overrides["api_base_url"] = args.api_url
    if getattr(args, "endpoints", None):
        overrides["endpoints_file"] = Path(args.endpoints)
    if getattr(args, "exclude_label_prefix", None):
        overrides["exclude_label_key_prefixes"] = args.exclude_label_prefix
    return Settings(**overrides)


def run_generate(settings: Settings) -> int:
    endpoints = parse_endpoints_config(settings.endpoints_file) if settings.endpoints_file else {}
    store = ContentStore(content_dir=settings.content_dir)
    with ContentApiClient(settings.api_base_url, timeout=settings.request_timeout) as client:
        report = ContentGenerator(settings, client, store, endpoints).generate()
    print(
        f"Generated {len(report.pages_written)} page(s) for "
        f"{len(report.languages)} language(s), {len(report.pages_skipped)} skipped."
    )
    return 0


def run_navigation(settings: Settings, lang_code: str | None, route: str | None = None) -> int:
    """Print the navigation forest, or the page serving *route*, as JSON."""
    store = ContentStore(content_dir=settings.content_dir)
    languages = load_languages(store, settings)
    if lang_code is None:
        lang = languages.current_lang(route) if route else languages.default_lang
        lang_code = lang.code if lang else "en"
    if languages.langs and lang_code not in languages.lang_codes:
        logger.warning("Unknown language %s, known: %s", lang_code, languages.lang_codes)
    site_navigation = load_site_navigation(store, settings, lang_code)

    output: Any
    if route is None:
        output = [
            item.model_dump(by_alias=True, exclude_none=True)
            for item in site_navigation.navigation
        ]
    else:
        page = site_navigation.resolve_page(route)
        if page is None:
            msg = f"No page serves route {route}"
            raise ValueError(msg)
        output = page.model_dump(by_alias=True, exclude_none=True)
        if page.resolve_slug is not None:
            output["resolveSlug"] = page.resolve_slug
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def run_redirect(settings: Settings, output: Path) -> int:
    store = ContentStore(content_dir=settings.content_dir)
    langs = load_languages(store, settings).langs
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_default_redirect(langs), encoding="utf-8")
    print(f"Wrote redirect page {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagesmith",
        description="Generate a static content store from a headless CMS",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--content-dir", "-d", help="Content root folder (default: ./content)")

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Fetch the CMS and rewrite the content")
    generate.add_argument("--api-url", help="Content API base URL without trailing slash")
    generate.add_argument("--endpoints", help="TOML file with custom content API endpoints")
    generate.add_argument(
        "--exclude-label-prefix",
        action="append",
        help="Drop label keys with this prefix (repeatable)",
    )

    navigation = subparsers.add_parser("navigation", help="Print the navigation tree as JSON")
    navigation.add_argument(
        "--lang", help="Language code (default: the route's language, else the default one)"
    )
    navigation.add_argument("--route", help="Print the page serving this route instead")

    redirect = subparsers.add_parser("redirect", help="Write the default language redirect page")
    redirect.add_argument("--output", "-o", required=True, help="HTML file to write")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    settings = build_settings(args)
    _configure_logging(settings.debug)

    try:
        if args.command == "generate":
            return run_generate(settings)
        if args.command == "navigation":
            return run_navigation(settings, args.lang, args.route)
        return run_redirect(settings, Path(args.output))
    except (ValueError, httpx.HTTPError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


def cli_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
