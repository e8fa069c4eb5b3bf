"""Tests for configuration source assembly."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from appsettings_edu.config.sources import (
    ConfigurationSource,
    SourceKind,
    build_configuration_sources,
    get_base_directory,
)
from appsettings_edu.core.exceptions import MissingRequiredSourceError, ValidationError


class TestBuildConfigurationSources:
    """Tests for build_configuration_sources."""

    def test_production_order(
        self, config_dir: Path, production_environ: Dict[str, str]
    ) -> None:
        """Without an environment, base file then environment variables."""
        sources = build_configuration_sources(config_dir, environ=production_environ)

        assert [source.kind for source in sources] == [SourceKind.FILE, SourceKind.ENVIRONMENT]
        assert sources[0].path == config_dir / "appsettings.json"
        assert sources[0].optional is False

    def test_environment_overlay_added(
        self, config_dir: Path, development_environ: Dict[str, str]
    ) -> None:
        """With an environment, the overlay sits between base and variables."""
        sources = build_configuration_sources(config_dir, environ=development_environ)

        assert [source.kind for source in sources] == [
            SourceKind.FILE,
            SourceKind.FILE,
            SourceKind.ENVIRONMENT,
        ]
        overlay = sources[1]
        assert overlay.path == config_dir / "appsettings.Development.json"
        assert overlay.optional is True
        assert overlay.reload_on_change is True

    def test_missing_overlay_tolerated(self, config_dir: Path) -> None:
        """An absent overlay file should still be listed, not raise."""
        sources = build_configuration_sources(config_dir, environ={"APP_ENVIRONMENT": "Staging"})

        assert sources[1].path == config_dir / "appsettings.Staging.json"
        assert sources[1].exists() is False

    def test_missing_base_file(
        self, temp_dir: Path, development_environ: Dict[str, str]
    ) -> None:
        """A missing base file should raise MissingRequiredSourceError."""
        (temp_dir / "appsettings.Development.json").write_text("{}")

        with pytest.raises(MissingRequiredSourceError) as exc_info:
            build_configuration_sources(temp_dir, environ=development_environ)

        assert exc_info.value.details["source"].endswith("appsettings.json")

    def test_missing_base_directory(self, temp_dir: Path) -> None:
        """A missing base directory means a missing base file."""
        with pytest.raises(MissingRequiredSourceError):
            build_configuration_sources(temp_dir / "nowhere", environ={})

    def test_base_dir_must_be_directory(self, config_dir: Path) -> None:
        """A file passed as base directory should be rejected."""
        with pytest.raises(ValidationError):
            build_configuration_sources(config_dir / "appsettings.json", environ={})

    def test_environment_prefix_passed_through(self, config_dir: Path) -> None:
        """The environment source should carry the prefix filter."""
        sources = build_configuration_sources(config_dir, environ={}, environment_prefix="MYAPP_")

        assert sources[-1].prefix == "MYAPP_"
        assert "MYAPP_" in sources[-1].name

    def test_default_base_directory_is_package(self) -> None:
        """The default base directory should ship appsettings.json."""
        base_dir = get_base_directory()

        assert base_dir.name == "appsettings_edu"
        assert (base_dir / "appsettings.json").is_file()


class TestConfigurationSource:
    """Tests for ConfigurationSource."""

    def test_json_file_source(self, temp_dir: Path) -> None:
        """File sources should expose the path as name."""
        source = ConfigurationSource.json_file(temp_dir / "a.json", optional=True)

        assert source.kind is SourceKind.FILE
        assert source.name == str(temp_dir / "a.json")
        assert source.exists() is False
        assert source.signature() is None

    def test_signature_tracks_file(self, temp_dir: Path) -> None:
        """The signature should change when a file appears."""
        path = temp_dir / "a.json"
        source = ConfigurationSource.json_file(path)
        assert source.signature() is None

        path.write_text("{}")
        assert source.signature() is not None

    def test_environment_source(self) -> None:
        """Environment sources always exist and have no signature."""
        source = ConfigurationSource.environment_variables()

        assert source.exists() is True
        assert source.signature() is None
        assert source.name == "environment variables"

    def test_sources_are_immutable(self, temp_dir: Path) -> None:
        """Sources should be frozen."""
        source = ConfigurationSource.json_file(temp_dir / "a.json")

        with pytest.raises(AttributeError):
            source.optional = True  # type: ignore[misc]
