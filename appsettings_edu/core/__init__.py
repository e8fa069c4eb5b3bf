"""
Core module containing the error hierarchy and the application root.

This module provides:
- Custom exceptions
- Application: composition root for the demo (see core.application)
"""

from appsettings_edu.core.exceptions import (
    AppSettingsError,
    ConfigParseError,
    InvalidArgumentError,
    MissingRequiredSourceError,
    TypeCoercionError,
    ValidationError,
)

__all__ = [
    "AppSettingsError",
    "ConfigParseError",
    "InvalidArgumentError",
    "MissingRequiredSourceError",
    "TypeCoercionError",
    "ValidationError",
]
