"""
Utility modules for appsettings-edu.

Provides common functionality:
- validators: Boundary input validation
"""

from appsettings_edu.utils.validators import (
    validate_directory,
    validate_environment_name,
    validate_key,
)

__all__ = [
    "validate_directory",
    "validate_environment_name",
    "validate_key",
]
