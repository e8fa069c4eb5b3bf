"""
Current-environment selection.

The environment name picks the optional overlay file
(``appsettings.{environment}.json``) layered on top of the base file.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional, Tuple

# Checked in order, first non-empty value wins.
ENVIRONMENT_VARIABLES: Tuple[str, ...] = ("HOSTING_ENVIRONMENT", "APP_ENVIRONMENT")

DEFAULT_ENVIRONMENT_NAME = "Production"


def get_environment_name(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Get the current environment name.

    The environment is read on every call; nothing is cached.

    Args:
        environ: Environment snapshot (defaults to os.environ).

    Returns:
        The first non-empty candidate value, or None if none is set.
    """
    if environ is None:
        environ = os.environ

    for variable in ENVIRONMENT_VARIABLES:
        value = environ.get(variable)
        if value and value.strip():
            return value.strip()

    return None


def describe_environment(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the environment name for display, Production when unset."""
    return get_environment_name(environ) or DEFAULT_ENVIRONMENT_NAME
