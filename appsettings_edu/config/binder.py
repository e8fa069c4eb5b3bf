"""
Typed access to configuration values.

Raw configuration values are strings. This module converts them into the
supported primitive kinds (str, int, bool, Decimal) and binds whole
sections onto pydantic models field by field.
"""

from __future__ import annotations

import re
import types
import typing
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from appsettings_edu.config.logging_config import get_logger
from appsettings_edu.config.tree import ConfigurationSection
from appsettings_edu.core.exceptions import TypeCoercionError
from appsettings_edu.utils.validators import validate_key


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?[0-9]+\s*$")
_DECIMAL_PATTERN = re.compile(
    r"^\s*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$"
)

# Integer settings are 32-bit signed
INTEGER_MIN = -(2 ** 31)
INTEGER_MAX = 2 ** 31 - 1


class _Missing:
    """Marker for a field with no value in any source."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING = _Missing()


class SettingKind(Enum):
    """Primitive kinds a raw value can be coerced into."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"

    @classmethod
    def from_type(cls, target: Any) -> "SettingKind":
        """
        Map a Python type to its setting kind.

        Raises:
            TypeCoercionError: If the type is not a supported primitive.
        """
        if isinstance(target, SettingKind):
            return target
        try:
            return _KIND_BY_TYPE[target]
        except (KeyError, TypeError):
            raise TypeCoercionError(
                f"Unsupported target type: {_type_name(target)}",
                target_type=_type_name(target),
            ) from None

    @property
    def python_type(self) -> type:
        """Python type produced by this kind."""
        return _TYPE_BY_KIND[self]


_KIND_BY_TYPE: Dict[Any, SettingKind] = {
    str: SettingKind.STRING,
    int: SettingKind.INTEGER,
    bool: SettingKind.BOOLEAN,
    Decimal: SettingKind.DECIMAL,
}
_TYPE_BY_KIND = {kind: python_type for python_type, kind in _KIND_BY_TYPE.items()}

_UNION_ORIGINS = (Union, getattr(types, "UnionType", Union))


def _parse_integer(raw: str) -> int:
    if not _INTEGER_PATTERN.match(raw):
        raise ValueError(f"not an integer: {raw!r}")
    value = int(raw.strip())
    if not INTEGER_MIN <= value <= INTEGER_MAX:
        raise ValueError(f"integer out of range: {raw!r}")
    return value


def _parse_boolean(raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_decimal(raw: str) -> Decimal:
    if not _DECIMAL_PATTERN.match(raw):
        raise ValueError(f"not a decimal: {raw!r}")
    try:
        return Decimal(raw.strip())
    except InvalidOperation as e:
        raise ValueError(f"not a decimal: {raw!r}") from e


PARSERS: Dict[SettingKind, Callable[[str], Any]] = {
    SettingKind.STRING: str,
    SettingKind.INTEGER: _parse_integer,
    SettingKind.BOOLEAN: _parse_boolean,
    SettingKind.DECIMAL: _parse_decimal,
}

ZERO_VALUES: Dict[SettingKind, Any] = {
    SettingKind.STRING: "",
    SettingKind.INTEGER: 0,
    SettingKind.BOOLEAN: False,
    SettingKind.DECIMAL: Decimal(0),
}


def _type_name(target: Any) -> str:
    if isinstance(target, SettingKind):
        return target.python_type.__name__
    return getattr(target, "__name__", repr(target))


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in _UNION_ORIGINS:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def coerce_value(raw: Optional[str], target: Any, key: str = "") -> Any:
    """
    Coerce a raw configuration value into a primitive kind.

    Strings never fail: an absent value becomes "". Every other kind
    requires a value that parses with locale-invariant rules.

    Args:
        raw: Raw string, or None when the key is absent.
        target: str, int, bool, Decimal or a SettingKind.
        key: Fully qualified key for error messages.

    Returns:
        The coerced value.

    Raises:
        TypeCoercionError: If the value is absent or does not parse.
    """
    kind = SettingKind.from_type(target)

    if raw is None:
        if kind is SettingKind.STRING:
            logger.debug(f"No value for '{key}', returning empty string")
            return ""
        raise TypeCoercionError(
            f"No value found for '{key}' (expected {_type_name(target)})",
            key=key,
            target_type=_type_name(target),
        )

    try:
        return PARSERS[kind](raw)
    except ValueError:
        raise TypeCoercionError(
            f"Value of '{key}' cannot be converted to {_type_name(target)}",
            key=key,
            target_type=_type_name(target),
            value=raw,
        ) from None


class ConfigurationBinder:
    """
    Binds configuration sections to typed values and models.

    Model fields are looked up at ``section:<alias or name>``, matched
    case-insensitively. Unresolved fields keep their declared default or,
    lacking one, the zero value of their kind. With ``strict=True``,
    unresolved fields without a default raise TypeCoercionError instead.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def get_value(self, section: ConfigurationSection, key: str, target: Any = str) -> Any:
        """
        Get a typed value below a section.

        Args:
            section: Section the key is relative to.
            key: Key relative to the section.
            target: Primitive type, SettingKind or pydantic model class.

        Raises:
            InvalidArgumentError: If key is empty or whitespace.
            TypeCoercionError: If the value cannot be produced.
        """
        validate_key(key)

        if _is_model(target):
            return self.bind(section.get_section(key), target)

        child = section.get_section(key)
        return coerce_value(child.value, target, child.path)

    def bind(self, section: ConfigurationSection, model: Type[ModelT]) -> ModelT:
        """
        Bind a section onto a pydantic model.

        Args:
            section: Section holding the model's fields.
            model: Model class to instantiate.

        Returns:
            Model instance, possibly partially bound.

        Raises:
            TypeCoercionError: If a present value does not convert, or
                strict mode finds unresolved fields.
        """
        values: Dict[str, Any] = {}
        unresolved: List[str] = []

        for name, field in model.model_fields.items():
            alias = field.alias or name
            child = section.get_section(alias)
            if not child.exists() and alias != name and section.get_section(name).exists():
                child = section.get_section(name)

            value = self._bind_annotation(child, field.annotation)
            if value is MISSING:
                if not field.is_required():
                    continue
                if self.strict:
                    unresolved.append(child.path)
                    continue
                value = self._zero_value(child, field.annotation)

            values[alias] = value

        if unresolved:
            raise TypeCoercionError(
                f"Unresolved settings for {model.__name__}: {', '.join(unresolved)}",
                key=section.path,
                target_type=model.__name__,
                details={"unresolved": unresolved},
            )

        try:
            return model.model_validate(values)
        except ModelValidationError as e:
            raise TypeCoercionError(
                f"Settings at '{section.path}' do not satisfy {model.__name__}: {e}",
                key=section.path,
                target_type=model.__name__,
            ) from e

    def _bind_annotation(self, section: ConfigurationSection, annotation: Any) -> Any:
        annotation = _unwrap_optional(annotation)

        if _is_model(annotation):
            if not section.exists():
                return MISSING
            return self.bind(section, annotation)

        origin = typing.get_origin(annotation)
        if origin in (list, List):
            children = section.get_children()
            if not children:
                return MISSING
            (item_type,) = typing.get_args(annotation) or (str,)
            items = [self._bind_annotation(child, item_type) for child in children]
            return [item for item in items if item is not MISSING]

        if origin in (dict, Dict):
            children = section.get_children()
            if not children:
                return MISSING
            args = typing.get_args(annotation)
            value_type = args[1] if len(args) == 2 else str
            bound = {child.key: self._bind_annotation(child, value_type) for child in children}
            return {key: value for key, value in bound.items() if value is not MISSING}

        if section.value is None:
            return MISSING
        if annotation is Any:
            return section.value
        return coerce_value(section.value, annotation, section.path)

    def _zero_value(self, section: ConfigurationSection, annotation: Any) -> Any:
        if typing.get_origin(annotation) in _UNION_ORIGINS and type(None) in typing.get_args(annotation):
            return None

        if _is_model(annotation):
            return self.bind(section, annotation)

        origin = typing.get_origin(annotation)
        if origin in (list, List):
            return []
        if origin in (dict, Dict):
            return {}
        if annotation is Any:
            return None
        return ZERO_VALUES[SettingKind.from_type(annotation)]
