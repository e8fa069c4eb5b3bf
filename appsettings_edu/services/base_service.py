"""
Base class for the demo services.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from appsettings_edu.config.logging_config import get_logger


SEPARATOR = "################################"


class BaseService(ABC):
    """
    A service that reads configuration and logs what it finds.

    Subclasses implement ``run``.
    """

    def __init__(
        self,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ) -> None:
        self.logger = logger or get_logger(f"services.{self.name}")

    @property
    def name(self) -> str:
        """Service name used for the default logger."""
        return self.__class__.__name__

    @abstractmethod
    def run(self) -> None:
        """Read and log configuration values."""

    def _separator(self) -> None:
        self.logger.info(SEPARATOR)
