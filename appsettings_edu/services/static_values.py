"""
Static values holder.

Mirrors the classic pattern of a constants class where some entries come
from configuration. The values are read when the holder is created, not
at import time.
"""

from __future__ import annotations

from dataclasses import dataclass

from appsettings_edu.config.resolver import ConfigResolver


SOME_STRING_VALUE = "Some string value"


@dataclass(frozen=True)
class StaticValues:
    """Constant and configuration-backed values."""

    some_config_string: str
    some_string_value: str = SOME_STRING_VALUE

    @classmethod
    def from_resolver(cls, resolver: ConfigResolver) -> "StaticValues":
        """Create the holder, reading ``AppSettings:MySetting``."""
        return cls(some_config_string=resolver.get_value("MySetting", str))
