"""
Application - composition root for the demo.

Owns the resolver, configures logging from it, binds the settings model
and wires the services. Nothing here is global: callers create an
Application and pass it around.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from appsettings_edu.config.environment import describe_environment
from appsettings_edu.config.logging_config import (
    get_environment_logger,
    get_logger,
    setup_logging_from_configuration,
    shutdown_logging,
)
from appsettings_edu.config.models import SomeSettingsModel
from appsettings_edu.config.resolver import ConfigResolver
from appsettings_edu.services import BaseService, SomeSecondService, SomeService


logger = get_logger(__name__)

APPLICATION_NAME = "appsettings-edu"
SETTINGS_MODEL_PATH = "AppSettings:SomeSettingsModel"


class Application:
    """
    Wires configuration, logging and services together.

    Lifecycle: ``setup()`` once, ``run()`` any number of times, ``stop()``
    at exit to flush logs.
    """

    def __init__(self, resolver: ConfigResolver, log_level: Optional[str] = None) -> None:
        """
        Initialize the application.

        Args:
            resolver: Configuration resolver owned by this application.
            log_level: Level overriding the configured one.
        """
        self.resolver = resolver
        self.log_level = log_level
        self.settings_model: Optional[SomeSettingsModel] = None
        self.services: List[BaseService] = []

    def setup(self) -> None:
        """
        Configure logging and create services.

        Raises:
            AppSettingsError: If configuration cannot be resolved.
        """
        setup_logging_from_configuration(self.resolver.configuration, level=self.log_level)
        logger.info(f"{APPLICATION_NAME} start")

        self.settings_model = self.resolver.bind(SETTINGS_MODEL_PATH, SomeSettingsModel)

        environment = describe_environment(self.resolver.environ)
        self.services = [
            SomeService(
                self.resolver,
                self.settings_model,
                get_environment_logger("services.SomeService", environment),
            ),
            SomeSecondService(
                self.resolver,
                self.settings_model,
                get_environment_logger("services.SomeSecondService", environment),
            ),
        ]
        logger.debug(f"Setup complete: {len(self.services)} services")

    def run(self, pause: Optional[Callable[[], None]] = None) -> bool:
        """
        Run every service in order.

        Any error is logged once; the caller still gets to stop cleanly.

        Args:
            pause: Called after the services finish (e.g. wait for a key).

        Returns:
            True if every service completed.
        """
        if not self.services:
            self.setup()

        try:
            for service in self.services:
                service.run()
            if pause is not None:
                pause()
        except Exception as e:
            logger.error(f"Exception: {e}", exc_info=True)
            return False

        return True

    def stop(self) -> None:
        """Log shutdown and flush every log handler."""
        logger.info(f"{APPLICATION_NAME} stop")
        shutdown_logging()
