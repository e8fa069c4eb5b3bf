"""
Configuration resolver.

Provides a single object owning the layered configuration:

- Assembles sources (base file, environment overlay, environment variables)
- Builds and caches the merged configuration tree
- Exposes typed lookups in the ``AppSettings`` and ``ConnectionStrings``
  sections
- Rebuilds the tree when watched files change (best effort)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from appsettings_edu.config.binder import ConfigurationBinder
from appsettings_edu.config.environment import get_environment_name
from appsettings_edu.config.logging_config import get_logger
from appsettings_edu.config.sources import ConfigurationSource, build_configuration_sources
from appsettings_edu.config.tree import (
    ConfigurationSection,
    ConfigurationTree,
    build_configuration_tree,
)
from appsettings_edu.core.exceptions import TypeCoercionError
from appsettings_edu.utils.validators import validate_key


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

APP_SETTINGS_SECTION = "AppSettings"
CONNECTION_STRINGS_SECTION = "ConnectionStrings"

Signature = Dict[str, Optional[Tuple[float, int]]]


class ConfigResolver:
    """
    Resolves settings from layered JSON files and environment variables.

    The merged tree is built lazily on first access and is never mutated.
    ``reload()`` builds a new tree and replaces the reference in a single
    assignment, so readers always see a complete tree.

    Example:
        >>> resolver = ConfigResolver(base_dir="/opt/app")
        >>> resolver.get_value("SomeInt", int)
        42
        >>> resolver.get_connection_string("Default")
        'Server=.;Database=Demo'
    """

    def __init__(
        self,
        base_dir: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
        strict: bool = False,
        auto_reload: bool = False,
        environment_prefix: str = "",
    ) -> None:
        """
        Initialize the resolver.

        Args:
            base_dir: Directory containing appsettings.json
                (defaults to the package directory).
            environ: Fixed environment snapshot; when None, os.environ
                is read on every build.
            strict: Fail model binding on unresolved fields.
            auto_reload: Check watched files before every lookup.
            environment_prefix: Only use environment variables with
                this prefix (stripped from the key).
        """
        self.base_dir = Path(base_dir) if base_dir else None
        self.environ = environ
        self.auto_reload = auto_reload
        self.environment_prefix = environment_prefix
        self.binder = ConfigurationBinder(strict=strict)

        self._configuration: Optional[ConfigurationTree] = None
        self._sources: List[ConfigurationSource] = []
        self._signature: Signature = {}

    @property
    def environment_name(self) -> Optional[str]:
        """Current environment name, or None when unset."""
        return get_environment_name(self._environ())

    def _environ(self) -> Mapping[str, str]:
        return self.environ if self.environ is not None else os.environ

    def build_configuration_sources(self) -> List[ConfigurationSource]:
        """
        Build the ordered source list.

        Exposed so other hosts can assemble their own pipeline from the
        same source order.

        Raises:
            MissingRequiredSourceError: If appsettings.json is absent.
        """
        return build_configuration_sources(
            self.base_dir,
            environ=self._environ(),
            environment_prefix=self.environment_prefix,
        )

    def build(self) -> ConfigurationTree:
        """
        Build a fresh configuration tree without touching the cached one.

        Raises:
            MissingRequiredSourceError: If appsettings.json is absent.
            ConfigParseError: If any file fails to parse.
        """
        return self._build()[0]

    def _build(self) -> Tuple[ConfigurationTree, List[ConfigurationSource], Signature]:
        environ = dict(self._environ())
        sources = build_configuration_sources(
            self.base_dir,
            environ=environ,
            environment_prefix=self.environment_prefix,
        )
        signature = self._capture_signature(sources)
        return build_configuration_tree(sources, environ), sources, signature

    @staticmethod
    def _capture_signature(sources: List[ConfigurationSource]) -> Signature:
        return {
            source.name: source.signature()
            for source in sources
            if source.reload_on_change
        }

    @property
    def configuration(self) -> ConfigurationTree:
        """The current configuration tree, built on first access."""
        if self.auto_reload and self._configuration is not None:
            self.reload_if_changed()
        if self._configuration is None:
            return self.reload()
        return self._configuration

    @property
    def sources(self) -> List[ConfigurationSource]:
        """Sources used for the current tree."""
        if self._configuration is None:
            self.reload()
        return list(self._sources)

    def reload(self) -> ConfigurationTree:
        """
        Rebuild the tree and swap it in.

        On failure the previous tree stays in place and the error
        propagates.
        """
        configuration, sources, signature = self._build()
        self._sources = sources
        self._signature = signature
        self._configuration = configuration
        logger.debug(f"Configuration built with {len(configuration)} keys")
        return configuration

    def reload_if_changed(self) -> bool:
        """
        Rebuild the tree if a watched file changed since the last build.

        Returns:
            True if the tree was rebuilt.
        """
        if self._configuration is None:
            self.reload()
            return True

        if self._capture_signature(self._sources) == self._signature:
            return False

        logger.info("Configuration files changed, reloading")
        self.reload()
        return True

    def get_section(self, path: str) -> ConfigurationSection:
        """Get a section of the current configuration."""
        return self.configuration.get_section(path)

    def get_value(self, key: str, target: Any = str) -> Any:
        """
        Get a typed value from the ``AppSettings`` section.

        Absent string values resolve to "" rather than failing.

        Args:
            key: Key relative to AppSettings (e.g. "MainSetting:SubSetting").
            target: str, int, bool, Decimal, a SettingKind or a model class.

        Raises:
            InvalidArgumentError: If key is empty or whitespace.
            TypeCoercionError: If the value is absent (non-string) or
                does not convert.
        """
        validate_key(key)
        return self.binder.get_value(self.get_section(APP_SETTINGS_SECTION), key, target)

    def get_connection_string(self, key: str) -> str:
        """
        Get a connection string from the ``ConnectionStrings`` section.

        Raises:
            InvalidArgumentError: If key is empty or whitespace.
            TypeCoercionError: If no connection string has that name.
        """
        validate_key(key)
        section = self.get_section(CONNECTION_STRINGS_SECTION).get_section(key)
        if section.value is None:
            raise TypeCoercionError(
                f"Connection string '{key}' is not configured",
                key=section.path,
                target_type="str",
            )
        return section.value

    def bind(self, path: str, model: Type[ModelT]) -> ModelT:
        """
        Bind the section at an absolute path onto a model.

        Args:
            path: Section path (e.g. "AppSettings:SomeSettingsModel").
            model: Pydantic model class.
        """
        validate_key(path, argument="path")
        return self.binder.bind(self.get_section(path), model)
