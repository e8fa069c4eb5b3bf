#!/usr/bin/env python3
"""
Basic usage example for appsettings-edu.

Demonstrates reading typed values, connection strings and a bound
settings model from the shipped configuration files.
"""

import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from appsettings_edu.config.logging_config import setup_logging, get_logger
from appsettings_edu.config.models import SomeSettingsModel
from appsettings_edu.config.resolver import ConfigResolver
from appsettings_edu.core.exceptions import AppSettingsError


def main() -> None:
    """Run basic usage example."""
    setup_logging(level="INFO")
    logger = get_logger(__name__)

    # Reads appsettings.json next to the package, plus the overlay
    # selected by HOSTING_ENVIRONMENT and any AppSettings__* variables
    resolver = ConfigResolver()

    logger.info(f"Environment: {resolver.environment_name or 'Production'}")
    for source in resolver.sources:
        logger.info(f"Source: {source.name}")

    try:
        logger.info(f"MySetting: {resolver.get_value('MySetting')}")
        logger.info(f"SubSetting: {resolver.get_value('MainSetting:SubSetting')}")
        logger.info(f"SomeInt: {resolver.get_value('SomeInt', int)}")
        logger.info(f"SomeBool: {resolver.get_value('SomeBool', bool)}")
        logger.info(f"Somedecimal: {resolver.get_value('Somedecimal', Decimal)}")
        logger.info(f"Default connection: {resolver.get_connection_string('Default')}")

        model = resolver.get_value("SomeSettingsModel", SomeSettingsModel)
        logger.info(f"Settings model: {model.model_dump(by_alias=True)}")
    except AppSettingsError as e:
        logger.error(f"Failed to read settings: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
