"""Tests for the custom endpoints TOML reader."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from pagesmith.exceptions import EndpointConfigError
from pagesmith.filesystem.endpoints_config import (
    default_resolve,
    import_resolve,
    parse_endpoints_config,
    validate_endpoint_name,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / "endpoints.toml"
    config_path.write_text(text)
    return config_path


class TestDefaultResolve:
    def test_list_response(self) -> None:
        assert default_resolve([{"slug": "a"}]) == [{"slug": "a"}]

    def test_envelope_response(self) -> None:
        assert default_resolve({"items": [{"slug": "a"}]}) == [{"slug": "a"}]

    def test_other_response(self) -> None:
        assert default_resolve({"total": 0}) == []
        assert default_resolve(None) == []


class TestParseEndpointsConfig:
    def test_endpoint_with_resolver(self, tmp_path: Path) -> None:
        config_path = _write(
            tmp_path,
            """\
[endpoints.cities]
path = "/cities"
query_params = { lang_id = "{lang.id}" }

[endpoints.cities.resolver]
entity = "city"
""",
        )
        endpoints = parse_endpoints_config(config_path)
        cities = endpoints["cities"]
        assert cities.path == "/cities"
        assert cities.query_params == {"lang_id": "{lang.id}"}
        assert cities.resolver is not None
        assert cities.resolver.entity_name == "city"
        assert cities.resolver.resolve is default_resolve

    def test_endpoint_without_resolver(self, tmp_path: Path) -> None:
        endpoints = parse_endpoints_config(
            _write(tmp_path, '[endpoints.partners]\npath = "/partners"\n')
        )
        assert endpoints["partners"].resolver is None
        assert endpoints["partners"].query_params == {}

    def test_resolver_import_reference(self, tmp_path: Path) -> None:
        config_path = _write(
            tmp_path,
            """\
[endpoints.cities]
path = "/cities"

[endpoints.cities.resolver]
entity = "city"
resolve = "json:loads"
""",
        )
        resolver = parse_endpoints_config(config_path)["cities"].resolver
        assert resolver is not None
        assert resolver.resolve is json.loads

    def test_empty_file(self, tmp_path: Path) -> None:
        assert parse_endpoints_config(_write(tmp_path, "")) == {}

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(EndpointConfigError, match="missing required 'path'"):
            parse_endpoints_config(_write(tmp_path, "[endpoints.cities]\n"))

    def test_missing_entity(self, tmp_path: Path) -> None:
        text = '[endpoints.cities]\npath = "/cities"\n[endpoints.cities.resolver]\n'
        with pytest.raises(EndpointConfigError, match="'entity'"):
            parse_endpoints_config(_write(tmp_path, text))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(EndpointConfigError, match="Invalid endpoints file"):
            parse_endpoints_config(_write(tmp_path, "[endpoints\n"))

    def test_invalid_name(self, tmp_path: Path) -> None:
        text = '[endpoints."city list"]\npath = "/cities"\n'
        with pytest.raises(EndpointConfigError, match="name check pattern"):
            parse_endpoints_config(_write(tmp_path, text))


class TestImportResolve:
    def test_bad_reference_format(self) -> None:
        with pytest.raises(EndpointConfigError, match="module:function"):
            import_resolve("json.loads")

    def test_missing_module(self) -> None:
        with pytest.raises(EndpointConfigError, match="Cannot import"):
            import_resolve("pagesmith_no_such_module:resolve")

    def test_not_callable(self) -> None:
        with pytest.raises(EndpointConfigError, match="not a callable"):
            import_resolve("json:__name__")


class TestValidateEndpointName:
    @pytest.mark.parametrize("name", ["cities", "city-list", "city_list", "Cities2"])
    def test_valid(self, name: str) -> None:
        validate_endpoint_name(name)

    @pytest.mark.parametrize("name", ["", "city list", "cities/all", "villes-été"])
    def test_invalid(self, name: str) -> None:
        with pytest.raises(EndpointConfigError):
            validate_endpoint_name(name)
