"""Tests for configuration tree construction and lookup."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from appsettings_edu.config.sources import ConfigurationSource, SourceKind
from appsettings_edu.config.tree import (
    ConfigurationTree,
    build_configuration_tree,
    flatten_json,
    load_environment_source,
    load_json_source,
)
from appsettings_edu.core.exceptions import ConfigParseError, MissingRequiredSourceError


class TestConfigurationTree:
    """Tests for ConfigurationTree lookups."""

    @pytest.fixture
    def tree(self) -> ConfigurationTree:
        return ConfigurationTree(
            {
                "AppSettings:MySetting": "value",
                "AppSettings:MainSetting:SubSetting": "sub",
                "AppSettings:Hosts:0": "alpha",
                "AppSettings:Hosts:1": "beta",
                "AppSettings:Hosts:10": "kappa",
                "ConnectionStrings:Default": "conn",
            }
        )

    def test_case_insensitive_lookup(self, tree: ConfigurationTree) -> None:
        """Keys should match regardless of case."""
        assert tree["appsettings:mysetting"] == "value"
        assert tree["APPSETTINGS:MYSETTING"] == "value"
        assert "appSettings:mainSetting:subSetting" in tree

    def test_missing_key(self, tree: ConfigurationTree) -> None:
        """Missing keys should raise KeyError and get() should return None."""
        with pytest.raises(KeyError):
            tree["AppSettings:Nope"]
        assert tree.get("AppSettings:Nope") is None

    def test_first_spelling_kept(self) -> None:
        """Later writes should keep the first key spelling."""
        tree = ConfigurationTree([("AppSettings:Key", "a"), ("APPSETTINGS:KEY", "b")])

        assert list(tree) == ["AppSettings:Key"]
        assert tree["appsettings:key"] == "b"

    def test_section_lookup(self, tree: ConfigurationTree) -> None:
        """Section lookups equal tree lookups at prefix:key."""
        section = tree.get_section("AppSettings")

        assert section["MySetting"] == tree["AppSettings:MySetting"]
        assert section.get("MainSetting:SubSetting") == "sub"
        assert section.get_section("MainSetting").get("SubSetting") == "sub"
        assert section.get("Nope") is None

    def test_section_exists(self, tree: ConfigurationTree) -> None:
        """Sections exist when they hold a value or children."""
        assert tree.get_section("AppSettings").exists()
        assert tree.get_section("AppSettings:MySetting").exists()
        assert not tree.get_section("Missing").exists()

    def test_children_sorted(self, tree: ConfigurationTree) -> None:
        """Indices should sort numerically before named children."""
        assert tree.get_children("AppSettings:Hosts") == ["0", "1", "10"]
        assert tree.get_children() == ["AppSettings", "ConnectionStrings"]

    def test_to_dict(self, tree: ConfigurationTree) -> None:
        """Nested dicts should be rebuilt; sequential indices become lists."""
        data = tree.to_dict("AppSettings")

        assert data["MySetting"] == "value"
        assert data["MainSetting"] == {"SubSetting": "sub"}
        assert data["Hosts"] == {"0": "alpha", "1": "beta", "10": "kappa"}

    def test_to_dict_list(self) -> None:
        """Contiguous indices should become a list."""
        tree = ConfigurationTree({"Hosts:0": "a", "Hosts:1": "b"})
        assert tree.to_dict() == {"Hosts": ["a", "b"]}

    def test_equality_ignores_key_case(self) -> None:
        """Trees with the same contents should compare equal."""
        left = ConfigurationTree({"A:B": "1"})
        right = ConfigurationTree({"a:b": "1"})

        assert left == right
        assert left != ConfigurationTree({"A:B": "2"})

    def test_equality_with_non_string_keys(self) -> None:
        """Mappings with non-string keys should compare unequal."""
        tree = ConfigurationTree({"1": "a"})

        assert tree != {1: "a"}
        assert not tree == {None: "a"}

    def test_empty_segments_ignored(self) -> None:
        """Keys with empty segments should not appear as children."""
        tree = ConfigurationTree({":X": "a", "A:": "b", "A:B": "c"})

        assert tree.get_children() == ["A"]
        assert tree.get_children("A") == ["B"]
        assert tree.to_dict() == {"A": {"B": "c"}}


class TestFlattenJson:
    """Tests for JSON flattening."""

    def test_nested_objects_and_arrays(
        self, write_json: Callable[[str, Any], Path]
    ) -> None:
        """Objects become colon paths, arrays become indices."""
        path = write_json(
            "appsettings.json",
            {"A": {"B": {"C": "deep"}, "List": [1, {"Name": "n"}]}},
        )
        data = load_json_source(ConfigurationSource.json_file(path))

        assert data == {"A:B:C": "deep", "A:List:0": "1", "A:List:1:Name": "n"}

    def test_scalars_become_strings(self, temp_dir: Path) -> None:
        """Numbers keep their text, booleans are lowercase, null is empty."""
        path = temp_dir / "appsettings.json"
        path.write_text('{"D": 1.50, "I": 42, "T": true, "F": false, "N": null, "S": "s"}')
        data = load_json_source(ConfigurationSource.json_file(path))

        assert data == {"D": "1.50", "I": "42", "T": "true", "F": "false", "N": "", "S": "s"}

    def test_root_must_be_object(self) -> None:
        """A non-object root should raise ConfigParseError."""
        with pytest.raises(ConfigParseError):
            flatten_json([1, 2, 3], "test.json")

    def test_duplicate_keys_rejected(self, temp_dir: Path) -> None:
        """Keys repeated with different case should raise ConfigParseError."""
        path = temp_dir / "appsettings.json"
        path.write_text('{"Key": "a", "KEY": "b"}')

        with pytest.raises(ConfigParseError) as exc_info:
            load_json_source(ConfigurationSource.json_file(path))

        assert exc_info.value.details["source"] == str(path)

    def test_byte_order_mark_accepted(self, temp_dir: Path) -> None:
        """A UTF-8 byte order mark should be ignored."""
        path = temp_dir / "appsettings.json"
        path.write_bytes(b'\xef\xbb\xbf{"Key": "value"}')

        assert load_json_source(ConfigurationSource.json_file(path)) == {"Key": "value"}


class TestLoadJsonSource:
    """Tests for reading JSON files."""

    def test_malformed_json(self, temp_dir: Path) -> None:
        """Malformed JSON should raise ConfigParseError naming the source."""
        path = temp_dir / "appsettings.json"
        path.write_text('{"AppSettings": {"MySetting": }')

        with pytest.raises(ConfigParseError) as exc_info:
            load_json_source(ConfigurationSource.json_file(path))

        assert exc_info.value.details["source"] == str(path)
        assert exc_info.value.details["line"] == 1

    def test_nan_rejected(self, temp_dir: Path) -> None:
        """Non-standard numeric literals should be rejected."""
        path = temp_dir / "appsettings.json"
        path.write_text('{"Value": NaN}')

        with pytest.raises(ConfigParseError):
            load_json_source(ConfigurationSource.json_file(path))

    def test_invalid_utf8(self, temp_dir: Path) -> None:
        """Undecodable files should raise ConfigParseError."""
        path = temp_dir / "appsettings.json"
        path.write_bytes(b'{"Key": "\xff"}')

        with pytest.raises(ConfigParseError):
            load_json_source(ConfigurationSource.json_file(path))

    def test_optional_missing_file(self, temp_dir: Path) -> None:
        """A missing optional file should contribute nothing."""
        source = ConfigurationSource.json_file(temp_dir / "missing.json", optional=True)
        assert load_json_source(source) == {}

    def test_required_missing_file(self, temp_dir: Path) -> None:
        """A missing required file should raise MissingRequiredSourceError."""
        source = ConfigurationSource.json_file(temp_dir / "missing.json")

        with pytest.raises(MissingRequiredSourceError):
            load_json_source(source)

    def test_file_source_without_path(self) -> None:
        """A file source with no path should raise MissingRequiredSourceError."""
        with pytest.raises(MissingRequiredSourceError):
            load_json_source(ConfigurationSource(kind=SourceKind.FILE))


class TestLoadEnvironmentSource:
    """Tests for environment variable flattening."""

    def test_double_underscore_delimiter(self) -> None:
        """Double underscores should become the key delimiter."""
        data = load_environment_source(
            ConfigurationSource.environment_variables(),
            {"AppSettings__MainSetting__SubSetting": "env", "PATH": "/bin"},
        )

        assert data["AppSettings:MainSetting:SubSetting"] == "env"
        assert data["PATH"] == "/bin"

    def test_prefix_filter(self) -> None:
        """Only prefixed variables should be used, prefix stripped."""
        data = load_environment_source(
            ConfigurationSource.environment_variables(prefix="MYAPP_"),
            {"MYAPP_AppSettings__Key": "yes", "AppSettings__Other": "no"},
        )

        assert data == {"AppSettings:Key": "yes"}

    @pytest.mark.parametrize(
        "name", ["__CF_USER_TEXT_ENCODING", "__INTELLIJ_COMMAND_HISTFILE__", "A____B", "__"]
    )
    def test_empty_segment_skipped(self, name: str) -> None:
        """Variables with an empty key segment should be skipped."""
        data = load_environment_source(
            ConfigurationSource.environment_variables(),
            {name: "x", "AppSettings__Key": "value"},
        )

        assert data == {"AppSettings:Key": "value"}


class TestBuildConfigurationTree:
    """Tests for merging sources."""

    def test_later_sources_win(
        self, temp_dir: Path, write_json: Callable[[str, Any], Path]
    ) -> None:
        """Overlay beats base and environment beats both."""
        base = write_json("appsettings.json", {"A": {"Key": "base", "Base": "b"}})
        overlay = write_json("appsettings.Dev.json", {"a": {"key": "overlay", "Env": "o"}})

        tree = build_configuration_tree(
            [
                ConfigurationSource.json_file(base),
                ConfigurationSource.json_file(overlay, optional=True),
                ConfigurationSource.environment_variables(),
            ],
            environ={"A__ENV": "environment"},
        )

        assert tree["A:Key"] == "overlay"
        assert tree["A:Base"] == "b"
        assert tree["A:Env"] == "environment"

    def test_parse_error_propagates(self, temp_dir: Path) -> None:
        """A bad overlay should fail the whole build."""
        base = temp_dir / "appsettings.json"
        base.write_text("{}")
        overlay = temp_dir / "appsettings.Dev.json"
        overlay.write_text("{not json")

        with pytest.raises(ConfigParseError) as exc_info:
            build_configuration_tree(
                [
                    ConfigurationSource.json_file(base),
                    ConfigurationSource.json_file(overlay, optional=True),
                ]
            )

        assert exc_info.value.details["source"] == str(overlay)

    def test_platform_variables_do_not_break_to_dict(self) -> None:
        """Variables starting or ending with a double underscore are ignored."""
        tree = build_configuration_tree(
            [ConfigurationSource.environment_variables()],
            {
                "__CF_USER_TEXT_ENCODING": "0x1F5:0x0:0x0",
                "__INTELLIJ_COMMAND_HISTFILE__": "/x",
                "AppSettings__Key": "value",
            },
        )

        assert tree.to_dict() == {"AppSettings": {"Key": "value"}}

    def test_build_is_idempotent(self, config_dir: Path) -> None:
        """Identical inputs should give identical trees."""
        sources = [
            ConfigurationSource.json_file(config_dir / "appsettings.json"),
            ConfigurationSource.environment_variables(),
        ]
        environ = {"AppSettings__SomeInt": "7"}

        first = build_configuration_tree(sources, environ)
        second = build_configuration_tree(sources, environ)

        assert first == second
        assert dict(first.items()) == dict(second.items())
