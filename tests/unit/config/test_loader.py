# pyright: reportAny=false, reportUnknownArgumentType=false
from pathlib import Path

import pytest

from hyperv.config import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from hyperv.exceptions import ConfigLoadError


class TestReadTomlFile:
    def test_parses_valid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        _ = path.write_text('[logs]\ndefault_lines = 20\nname = "x"\n')

        result = read_toml_file(path)

        assert result == {"logs": {"default_lines": 20, "name": "x"}}

    def test_config_load_error_includes_line_and_column(self, tmp_path: Path) -> None:
        path = tmp_path / "syntax_error.toml"
        _ = path.write_text('[valid]\nkey = "value"\n\n[invalid section\n')

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        error = exc_info.value
        assert error.path == path
        assert error.line == 4
        assert error.column is not None
        assert exc_info.value.__cause__ is not None

    def test_parses_empty_toml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.toml"
        _ = path.write_text("")

        assert read_toml_file(path) == {}


class TestDeepMerge:
    def test_merges_nested_dictionaries(self) -> None:
        result = deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})

        assert result == {"a": {"x": 1, "y": 3}}

    def test_replaces_arrays_entirely(self) -> None:
        result = deep_merge({"tags": ["a", "b"]}, {"tags": ["x"]})

        assert result == {"tags": ["x"]}

    def test_does_not_mutate_inputs(self) -> None:
        base = {"a": {"x": [1]}}
        override = {"a": {"y": 2}}

        result = deep_merge(base, override)
        result["a"]["x"].append(2)

        assert base == {"a": {"x": [1]}}
        assert override == {"a": {"y": 2}}


class TestParseEnvVars:
    def test_maps_double_underscore_to_nesting(self) -> None:
        environ = {"HYPERV_SUPERVISOR__SHUTDOWN_TIMEOUT": "3.5"}

        assert parse_env_vars(environ=environ) == {
            "supervisor": {"shutdown_timeout": 3.5}
        }

    def test_ignores_other_prefixes(self) -> None:
        environ = {"PATH": "/bin", "OTHER_SUPERVISOR__X": "1"}

        assert parse_env_vars(environ=environ) == {}

    def test_ignores_bare_prefix(self) -> None:
        assert parse_env_vars(environ={"HYPERV_": "1"}) == {}


class TestParseStringValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("42", 42),
            ("0.5", 0.5),
            ('["a", "b"]', ["a", "b"]),
            ('{"k": 1}', {"k": 1}),
            ("plain", "plain"),
            ("1.2.3", "1.2.3"),
        ],
    )
    def test_infers_types(self, raw: str, expected: object) -> None:
        assert parse_string_value(raw) == expected


class TestSetNestedKey:
    def test_creates_intermediate_dicts(self) -> None:
        d: dict[str, object] = {}

        set_nested_key(d, "supervisor.tick_interval", 1.0)

        assert d == {"supervisor": {"tick_interval": 1.0}}

    def test_replaces_scalar_on_path(self) -> None:
        d: dict[str, object] = {"logs": 5}

        set_nested_key(d, "logs.default_lines", 10)

        assert d == {"logs": {"default_lines": 10}}
