"""
Custom exception classes for appsettings-edu.

Provides a hierarchy of exceptions for configuration resolution failures,
enabling precise error handling and meaningful error messages.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AppSettingsError(Exception):
    """
    Base exception for all configuration resolution errors.

    All custom exceptions inherit from this class, allowing
    callers to catch every resolver-specific exception at once.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.
        error_code: Optional error code for categorization.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Additional context about the error.
            error_code: Optional error code for categorization.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "error_code": self.error_code,
        }


class InvalidArgumentError(AppSettingsError):
    """
    Exception raised when a caller passes an unusable argument.

    Raised when:
    - A setting key is empty or whitespace only
    - A key is not a string
    """

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize invalid argument error.

        Args:
            message: Error description.
            argument: Name of the offending argument.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if argument:
            details["argument"] = argument

        super().__init__(message, details=details, error_code="INVALID_ARGUMENT", **kwargs)


class MissingRequiredSourceError(AppSettingsError):
    """
    Exception raised when a required configuration source is absent.

    Raised when:
    - The base appsettings.json file does not exist
    - A required file vanished between assembly and build
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize missing source error.

        Args:
            message: Error description.
            source: Path or name of the missing source.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if source:
            details["source"] = source

        super().__init__(message, details=details, error_code="MISSING_SOURCE", **kwargs)


class ConfigParseError(AppSettingsError):
    """
    Exception raised when a configuration source cannot be parsed.

    Raised when:
    - A JSON file is malformed or not valid UTF-8
    - The JSON root is not an object
    - An object repeats a key (keys are case-insensitive)
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize parse error.

        Args:
            message: Error description.
            source: Name of the source that failed to parse.
            line: Line of the syntax error, when known.
            column: Column of the syntax error, when known.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if source:
            details["source"] = source
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column

        super().__init__(message, details=details, error_code="PARSE_ERROR", **kwargs)


class TypeCoercionError(AppSettingsError):
    """
    Exception raised when a value cannot be converted to the requested type.

    Raised when:
    - A raw string does not parse as the requested primitive
    - A non-string key is absent from every source
    - A required connection string is missing
    - Strict binding finds unresolved fields
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        target_type: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize type coercion error.

        Args:
            message: Error description.
            key: Fully qualified configuration key.
            target_type: Name of the requested type.
            value: The raw value (only its type is recorded).
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key
        if target_type:
            details["target_type"] = target_type
        if value is not None:
            # Configuration values may hold secrets
            details["value_type"] = type(value).__name__

        super().__init__(message, details=details, error_code="COERCION_ERROR", **kwargs)


class ValidationError(AppSettingsError):
    """
    Exception raised when input validation fails.

    Raised when:
    - A base directory is not a directory
    - A path contains a null byte
    - An environment name contains path separators
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error description.
            field: Name of the field that failed validation.
            value: The invalid value (sanitized).
            constraint: The constraint that was violated.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value_type"] = type(value).__name__
        if constraint:
            details["constraint"] = constraint

        super().__init__(message, details=details, error_code="VALIDATION_ERROR", **kwargs)
