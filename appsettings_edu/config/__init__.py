"""
Configuration management module.

Provides layered configuration from JSON files and environment
variables, typed lookups and logging setup.
"""

from appsettings_edu.config.binder import ConfigurationBinder, SettingKind, coerce_value
from appsettings_edu.config.environment import get_environment_name
from appsettings_edu.config.logging_config import get_logger, setup_logging
from appsettings_edu.config.resolver import ConfigResolver
from appsettings_edu.config.sources import (
    ConfigurationSource,
    SourceKind,
    build_configuration_sources,
)
from appsettings_edu.config.tree import (
    ConfigurationSection,
    ConfigurationTree,
    build_configuration_tree,
)

__all__ = [
    "ConfigResolver",
    "ConfigurationBinder",
    "ConfigurationSection",
    "ConfigurationSource",
    "ConfigurationTree",
    "SettingKind",
    "SourceKind",
    "build_configuration_sources",
    "build_configuration_tree",
    "coerce_value",
    "get_environment_name",
    "get_logger",
    "setup_logging",
]
