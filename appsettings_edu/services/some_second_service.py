"""
Service receiving a bound settings model directly.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from appsettings_edu.config.models import SomeSettingsModel
from appsettings_edu.config.resolver import ConfigResolver
from appsettings_edu.services.base_service import BaseService


class SomeSecondService(BaseService):
    """Logs the injected settings model and the Default connection string."""

    def __init__(
        self,
        resolver: ConfigResolver,
        settings_model: SomeSettingsModel,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ) -> None:
        super().__init__(logger)
        self.resolver = resolver
        self.settings_model = settings_model

    def run(self) -> None:
        self.access_typed_model_settings()
        self.access_connection_strings()

    def access_typed_model_settings(self) -> None:
        self.logger.info(
            "This is the second service demonstrating injection of typed configuration objects ..."
        )

        sub_settings = self.settings_model.some_sub_settings_model
        self.logger.info(f"Value from the model string: {self.settings_model.model_setting}")
        self.logger.info(
            f"Values from the settings model subsettings: "
            f"{sub_settings.my_model_sub_setting_string}, {sub_settings.my_model_sub_setting_int}"
        )
        self._separator()

    def access_connection_strings(self) -> None:
        connection_string = self.resolver.get_connection_string("Default")
        self.logger.info(f"Value from the default connection string: {connection_string}")
        self._separator()
