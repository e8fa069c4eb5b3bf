"""
Service demonstrating every way of reading settings.

Reads flat values straight from the tree, a bound settings model, a
connection string, typed values through the resolver and a static
values holder.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Union

from appsettings_edu.config.environment import describe_environment
from appsettings_edu.config.models import SomeSettingsModel
from appsettings_edu.config.resolver import ConfigResolver
from appsettings_edu.services.base_service import BaseService
from appsettings_edu.services.static_values import StaticValues


class SomeService(BaseService):
    """Logs values read from configuration in several ways."""

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
        """Run every access demonstration in order."""
        environment = describe_environment(self.resolver.environ)
        self.logger.info(f"The current environment is {environment}")
        self.logger.info("This service accesses the appsettings and prints out the values.")

        self.access_some_settings()
        self.access_typed_settings_objects()
        self.access_connection_strings()
        self.access_settings_with_resolver()
        self.access_static_values()

    def access_some_settings(self) -> None:
        """Read values directly from the merged tree by full path."""
        self.logger.info("Access the values in top level ...")

        configuration = self.resolver.configuration
        my_setting = configuration.get("AppSettings:MySetting")
        sub_setting = configuration.get("AppSettings:MainSetting:SubSetting")

        self.logger.info(f"Value from 'MySetting': {my_setting}")
        self.logger.info(f"Value from 'SubSetting' in 'MainSetting': {sub_setting}")
        self._separator()

    def access_typed_settings_objects(self) -> None:
        """Log the injected settings model."""
        self.logger.info("Access the values from strongly typed settings ...")

        sub_settings = self.settings_model.some_sub_settings_model
        self.logger.info(f"Value from the model string: {self.settings_model.model_setting}")
        self.logger.info(
            f"Values from the settings model subsettings: "
            f"{sub_settings.my_model_sub_setting_string}, {sub_settings.my_model_sub_setting_int}"
        )
        self._separator()

    def access_connection_strings(self) -> None:
        """Read the Default connection string from the tree."""
        self.logger.info("Access the connection strings ...")

        connection_string = self.resolver.get_section("ConnectionStrings").get("Default")
        self.logger.info(f"Value from Default ConnectionString: {connection_string}")
        self._separator()

    def access_settings_with_resolver(self) -> None:
        """Read typed values from the AppSettings section."""
        self.logger.info("Access the settings with typed resolver lookups ...")

        my_setting = self.resolver.get_value("MySetting", str)
        some_int = self.resolver.get_value("SomeInt", int)
        some_bool = self.resolver.get_value("SomeBool", bool)
        some_decimal = self.resolver.get_value("Somedecimal", Decimal)

        self.logger.info(f"String value from settings: {my_setting}")
        self.logger.info(f"Integer value from settings: {some_int}")
        self.logger.info(f"Boolean value from settings: {some_bool}")
        self.logger.info(f"Decimal value from settings: {some_decimal}")
        self._separator()

    def access_static_values(self) -> None:
        """Log a holder whose values were read through the resolver."""
        self.logger.info("Access a static values holder filled from configuration ...")

        static_values = StaticValues.from_resolver(self.resolver)
        self.logger.info(f"Constant value: {static_values.some_string_value}")
        self.logger.info(f"Value from configuration: {static_values.some_config_string}")
        self._separator()
