"""
Configuration source assembly.

Builds the ordered list of sources merged into the configuration tree:

1. ``appsettings.json`` (required)
2. ``appsettings.{environment}.json`` (optional)
3. Process environment variables (always present, highest priority)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Tuple, Union

from appsettings_edu.config.environment import get_environment_name
from appsettings_edu.config.logging_config import get_logger
from appsettings_edu.core.exceptions import MissingRequiredSourceError
from appsettings_edu.utils.validators import validate_directory, validate_environment_name


logger = get_logger(__name__)

BASE_FILE_NAME = "appsettings.json"
OVERLAY_FILE_TEMPLATE = "appsettings.{environment}.json"


class SourceKind(Enum):
    """Kind of configuration source."""

    FILE = "file"
    ENVIRONMENT = "environment"


@dataclass(frozen=True)
class ConfigurationSource:
    """
    A single ordered input to the configuration tree.

    Attributes:
        kind: File or process environment.
        path: JSON file path (file sources only).
        optional: Whether an absent file is tolerated.
        reload_on_change: Whether file changes trigger a rebuild.
        prefix: Only variables starting with this prefix are used,
            with the prefix stripped (environment sources only).
    """

    kind: SourceKind
    path: Optional[Path] = None
    optional: bool = False
    reload_on_change: bool = False
    prefix: str = ""

    @classmethod
    def json_file(
        cls,
        path: Union[str, Path],
        optional: bool = False,
        reload_on_change: bool = False,
    ) -> "ConfigurationSource":
        """Create a JSON file source."""
        return cls(
            kind=SourceKind.FILE,
            path=Path(path),
            optional=optional,
            reload_on_change=reload_on_change,
        )

    @classmethod
    def environment_variables(cls, prefix: str = "") -> "ConfigurationSource":
        """Create a process environment source."""
        return cls(kind=SourceKind.ENVIRONMENT, optional=True, prefix=prefix)

    @property
    def name(self) -> str:
        """Identity of the source used in errors and logs."""
        if self.kind is SourceKind.FILE:
            return str(self.path)
        if self.prefix:
            return f"environment variables ({self.prefix}*)"
        return "environment variables"

    def exists(self) -> bool:
        """Check whether the source is currently available."""
        if self.kind is SourceKind.ENVIRONMENT:
            return True
        return self.path is not None and self.path.is_file()

    def signature(self) -> Optional[Tuple[float, int]]:
        """
        Get the change signature of a file source.

        Returns:
            (mtime, size) of the file, or None if it is absent
            or the source is not a file.
        """
        if self.kind is not SourceKind.FILE or self.path is None:
            return None
        try:
            stat = self.path.stat()
        except OSError:
            return None
        return (stat.st_mtime, stat.st_size)


def get_base_directory() -> Path:
    """
    Get the directory holding the shipped configuration files.

    This is the installed package directory, so the result does not
    depend on the current working directory.
    """
    return Path(__file__).resolve().parent.parent


def build_configuration_sources(
    base_dir: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    environment_prefix: str = "",
) -> List[ConfigurationSource]:
    """
    Build the ordered list of configuration sources.

    Args:
        base_dir: Directory containing appsettings.json
            (defaults to the package directory).
        environ: Environment snapshot (defaults to os.environ).
        environment_prefix: Prefix filter for environment variables.

    Returns:
        Sources in ascending priority order.

    Raises:
        MissingRequiredSourceError: If appsettings.json does not exist.
        ValidationError: If base_dir is not a directory or the environment
            name contains path separators.
    """
    if environ is None:
        environ = os.environ

    directory = validate_directory(base_dir, must_exist=False) if base_dir else get_base_directory()

    base = ConfigurationSource.json_file(directory / BASE_FILE_NAME)
    if not base.exists():
        raise MissingRequiredSourceError(
            f"Required configuration file not found: {base.path}",
            source=str(base.path),
        )

    sources = [base]

    environment = get_environment_name(environ)
    if environment:
        validate_environment_name(environment)
        overlay = ConfigurationSource.json_file(
            directory / OVERLAY_FILE_TEMPLATE.format(environment=environment),
            optional=True,
            reload_on_change=True,
        )
        sources.append(overlay)
        if not overlay.exists():
            logger.debug(f"Optional overlay not found, skipping: {overlay.path}")

    sources.append(ConfigurationSource.environment_variables(prefix=environment_prefix))

    logger.debug(f"Configuration sources: {[source.name for source in sources]}")
    return sources
