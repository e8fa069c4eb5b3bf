"""
Logging configuration module.

Provides centralized logging setup with support for:
- Console output with colors
- File logging with rotation
- JSON structured logging
- Settings read from the ``Logging`` configuration section
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from pythonjsonlogger import jsonlogger

if TYPE_CHECKING:
    from appsettings_edu.config.tree import ConfigurationTree


ROOT_LOGGER_NAME = "appsettings_edu"
LOGGING_SECTION = "Logging"


class ColoredFormatter(logging.Formatter):
    """
    Colored log formatter for console output.

    Adds ANSI color codes based on log level.
    """

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, colouring a copy of its level name."""
        if self.use_colors and record.levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
            )
        return super().format(record)


class SettingsJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with a fixed set of top-level fields.

    Adds the environment name when a record carries one.
    """

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """
        Add custom fields to the JSON log record.

        Args:
            log_record: Dictionary to populate.
            record: Original log record.
            message_dict: Message dictionary.
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        if hasattr(record, "environment"):
            log_record["environment"] = record.environment


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file (None for console only).
        json_format: Use JSON format for logs.
        use_colors: Use colored console output.

    Returns:
        Configured package logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    shutdown_logging()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    if json_format:
        console_formatter: Union[SettingsJsonFormatter, ColoredFormatter] = SettingsJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s"
        )
    else:
        console_formatter = ColoredFormatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            use_colors=use_colors and sys.stdout.isatty(),
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(numeric_level)

            if json_format:
                file_formatter: Union[SettingsJsonFormatter, logging.Formatter] = SettingsJsonFormatter(
                    "%(timestamp)s %(level)s %(name)s %(message)s"
                )
            else:
                file_formatter = logging.Formatter(
                    fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )

            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Failed to configure file handler: {e}")

    return root_logger


def setup_logging_from_configuration(
    configuration: "ConfigurationTree",
    level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging from the ``Logging`` section of a configuration tree.

    Args:
        configuration: Resolved configuration tree.
        level: Level overriding the configured one (e.g. from the CLI).

    Returns:
        Configured package logger.
    """
    from appsettings_edu.config.binder import ConfigurationBinder
    from appsettings_edu.config.models import LoggingSettings

    settings = ConfigurationBinder().bind(
        configuration.get_section(LOGGING_SECTION), LoggingSettings
    )

    return setup_logging(
        level=level or settings.level,
        log_file=settings.file or None,
        json_format=settings.json_format,
        use_colors=settings.colors,
    )


def shutdown_logging() -> None:
    """Flush and close every handler attached to the package logger."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        try:
            handler.flush()
            handler.close()
        finally:
            root_logger.removeHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically module name).

    Returns:
        Logger instance below the package logger.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class EnvironmentLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that stamps records with the current environment name.
    """

    def process(self, msg: Any, kwargs: Any) -> Any:
        """
        Process log message with extra context.

        Args:
            msg: Log message.
            kwargs: Additional keyword arguments.

        Returns:
            Processed message and kwargs.
        """
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def get_environment_logger(name: str, environment: str) -> EnvironmentLoggerAdapter:
    """
    Get a logger that attaches the environment name to every record.

    Args:
        name: Logger name.
        environment: Current environment name.

    Returns:
        Logger adapter with environment context.
    """
    return EnvironmentLoggerAdapter(get_logger(name), {"environment": environment})
