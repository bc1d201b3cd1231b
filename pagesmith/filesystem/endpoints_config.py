"""TOML reader for custom content API endpoints and their page resolvers."""

from __future__ import annotations

import importlib
import re
import tomllib
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pagesmith.exceptions import EndpointConfigError

if TYPE_CHECKING:
    from pathlib import Path

ENDPOINT_NAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")

ResolveFn = Callable[[Any], Sequence[Mapping[str, Any]]]


def default_resolve(response: Any) -> list[dict[str, Any]]:
    """Entity records of a list response or of an ``{"items": [...]}`` envelope."""
    if isinstance(response, list):
        return response
    if isinstance(response, dict) and isinstance(response.get("items"), list):
        items: list[dict[str, Any]] = response["items"]
        return items
    return []


@dataclass(frozen=True)
class ResolverDef:
    """How entities for dynamic pages are extracted from an endpoint response."""

    entity_name: str
    resolve: ResolveFn = default_resolve


@dataclass(frozen=True)
class EndpointDef:
    """A custom endpoint mirrored into the content store."""

    path: str
    query_params: dict[str, str] = field(default_factory=dict)
    resolver: ResolverDef | None = None


def validate_endpoint_name(name: str) -> None:
    if not ENDPOINT_NAME_PATTERN.fullmatch(name):
        msg = (
            f"Custom endpoint name {name} contains invalid character(s) "
            f"=> name check pattern: {ENDPOINT_NAME_PATTERN.pattern}"
        )
        raise EndpointConfigError(msg)


def import_resolve(reference: str) -> ResolveFn:
    """Import a resolve function given as ``package.module:function``."""
    module_name, _, attr = reference.partition(":")
    if not module_name or not attr:
        msg = f"Resolver reference must look like 'module:function', got {reference!r}"
        raise EndpointConfigError(msg)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import resolver module {module_name!r}: {exc}"
        raise EndpointConfigError(msg) from exc
    resolve = getattr(module, attr, None)
    if not callable(resolve):
        msg = f"Resolver {reference!r} is not a callable"
        raise EndpointConfigError(msg)
    return resolve  # type: ignore[no-any-return]


def parse_endpoint(name: str, data: Mapping[str, Any]) -> EndpointDef:
    validate_endpoint_name(name)
    if "path" not in data:
        msg = f"Endpoint {name!r} missing required 'path' field"
        raise EndpointConfigError(msg)

    query_params = data.get("query_params", {})
    if not isinstance(query_params, dict):
        msg = f"Endpoint {name!r}: 'query_params' must be a table"
        raise EndpointConfigError(msg)

    resolver: ResolverDef | None = None
    resolver_data = data.get("resolver")
    if resolver_data is not None:
        if "entity" not in resolver_data:
            msg = f"Endpoint {name!r}: resolver missing required 'entity' field"
            raise EndpointConfigError(msg)
        reference = resolver_data.get("resolve")
        resolver = ResolverDef(
            entity_name=str(resolver_data["entity"]),
            resolve=import_resolve(reference) if reference else default_resolve,
        )

    return EndpointDef(
        path=str(data["path"]),
        query_params={str(k): str(v) for k, v in query_params.items()},
        resolver=resolver,
    )


def parse_endpoints_config(config_path: Path) -> dict[str, EndpointDef]:
    """Parse the endpoints TOML file.

    Returns a dict of endpoint name -> EndpointDef, in file order.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid endpoints file {config_path}: {exc}"
        raise EndpointConfigError(msg) from exc

    endpoints_data: dict[str, Any] = data.get("endpoints", {})
    return {name: parse_endpoint(name, info) for name, info in endpoints_data.items()}
