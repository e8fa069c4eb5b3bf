"""
Input validation utilities.

Guards applied at the resolver boundary so that bad arguments fail
before any configuration file is touched.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Union

from appsettings_edu.core.exceptions import InvalidArgumentError, ValidationError


def validate_key(key: Any, argument: str = "key") -> str:
    """
    Validate a configuration key.

    Args:
        key: Key passed by the caller.
        argument: Argument name reported in the error.

    Returns:
        The key, unchanged.

    Raises:
        InvalidArgumentError: If key is not a string or is blank.
    """
    if not isinstance(key, str):
        raise InvalidArgumentError(
            f"Key must be a string, got {type(key).__name__}", argument=argument
        )

    if not key.strip():
        raise InvalidArgumentError("Key must not be empty or whitespace", argument=argument)

    return key


def validate_directory(path: Union[str, "os.PathLike[str]"], must_exist: bool = True) -> Path:
    """
    Validate a base directory path.

    Args:
        path: Directory path to validate.
        must_exist: Directory must exist.

    Returns:
        Absolute, normalized directory path.

    Raises:
        ValidationError: If path is invalid.
    """
    raw = os.fspath(path)
    if not raw:
        raise ValidationError("Directory must be a non-empty path", field="base_dir")

    if "\x00" in raw:
        raise ValidationError("Path contains null byte", field="base_dir")

    directory = Path(os.path.normpath(os.path.abspath(raw)))

    if must_exist and not directory.exists():
        raise ValidationError(f"Directory does not exist: {raw}", field="base_dir")

    if directory.exists() and not directory.is_dir():
        raise ValidationError(
            f"Path is not a directory: {raw}",
            field="base_dir",
            constraint="must be a directory",
        )

    return directory


def validate_environment_name(name: str) -> str:
    """
    Validate an environment name used to select the overlay file.

    Args:
        name: Environment name read from the process environment.

    Returns:
        The name, unchanged.

    Raises:
        ValidationError: If the name would escape the base directory.
    """
    if "\x00" in name:
        raise ValidationError("Environment name contains null byte", field="environment")

    if "/" in name or "\\" in name or ".." in name:
        raise ValidationError(
            f"Environment name must not contain path separators: {name!r}",
            field="environment",
            value=name,
            constraint="no path separators",
        )

    return name
