"""
appsettings-edu - Layered application settings, demonstrated.

Reads flat values, typed settings models and connection strings from
appsettings.json, an optional environment-specific overlay and process
environment variables.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from appsettings_edu.config.resolver import ConfigResolver
from appsettings_edu.core.exceptions import (
    AppSettingsError,
    ConfigParseError,
    InvalidArgumentError,
    MissingRequiredSourceError,
    TypeCoercionError,
)

__all__ = [
    "ConfigResolver",
    "AppSettingsError",
    "ConfigParseError",
    "InvalidArgumentError",
    "MissingRequiredSourceError",
    "TypeCoercionError",
]
