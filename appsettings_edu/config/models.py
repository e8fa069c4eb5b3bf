"""
Settings models bound from configuration sections.

Field aliases carry the PascalCase names used in appsettings.json;
lookups are case-insensitive so either spelling works in overrides.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SettingsModel(BaseModel):
    """Base for models bound from configuration."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SomeSubSettingsModel(SettingsModel):
    """Nested settings inside SomeSettingsModel."""

    my_model_sub_setting_string: Optional[str] = Field(
        default=None, alias="MyModelSubSettingString"
    )
    my_model_sub_setting_int: int = Field(alias="MyModelSubSettingInt")


class SomeSettingsModel(SettingsModel):
    """Typed view of ``AppSettings:SomeSettingsModel``."""

    model_setting: Optional[str] = Field(default=None, alias="ModelSetting")
    some_sub_settings_model: SomeSubSettingsModel = Field(alias="SomeSubSettingsModel")


class LoggingSettings(SettingsModel):
    """Typed view of the ``Logging`` section."""

    level: str = Field(default="INFO", alias="Level")
    file: str = Field(default="", alias="File")
    json_format: bool = Field(default=False, alias="Json")
    colors: bool = Field(default=True, alias="Colors")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()
