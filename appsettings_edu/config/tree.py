"""
Configuration tree construction and lookup.

Each source is flattened into ``key:path -> string`` pairs and merged in
priority order. Keys are case-insensitive throughout.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from appsettings_edu.config.logging_config import get_logger
from appsettings_edu.config.sources import ConfigurationSource, SourceKind
from appsettings_edu.core.exceptions import ConfigParseError, MissingRequiredSourceError


logger = get_logger(__name__)

KEY_DELIMITER = ":"
ENVIRONMENT_DELIMITER = "__"


def normalize_key(key: str) -> str:
    """Normalize a key for case-insensitive comparison."""
    return key.casefold()


def combine_path(*segments: str) -> str:
    """Join key segments with the hierarchy delimiter, skipping empty ones."""
    return KEY_DELIMITER.join(segment for segment in segments if segment)


def _segment_sort_key(segment: str) -> Tuple[int, Union[int, str]]:
    # Array indices sort numerically ahead of named keys
    if segment.isdigit():
        return (0, int(segment))
    return (1, normalize_key(segment))


class ConfigurationTree(MappingABC):
    """
    Immutable, case-insensitive mapping of key paths to string values.

    Example:
        >>> tree = ConfigurationTree({"AppSettings:MySetting": "value"})
        >>> tree["appsettings:mysetting"]
        'value'
    """

    def __init__(
        self,
        data: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None,
    ) -> None:
        entries: Dict[str, Tuple[str, str]] = {}
        items = data.items() if isinstance(data, MappingABC) else (data or [])
        for key, value in items:
            normalized = normalize_key(key)
            # The first spelling of a key is kept for display
            original = entries[normalized][0] if normalized in entries else key
            entries[normalized] = (original, value)
        self._entries = entries

    def __getitem__(self, key: str) -> str:
        return self._entries[normalize_key(key)][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingABC):
            return NotImplemented
        if not all(isinstance(key, str) for key in other):
            return False
        theirs = {normalize_key(key): value for key, value in other.items()}
        ours = {normalized: value for normalized, (_, value) in self._entries.items()}
        return ours == theirs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigurationTree({dict(self.items())!r})"

    def get_section(self, path: str) -> "ConfigurationSection":
        """Get the section rooted at path (it may be empty)."""
        return ConfigurationSection(self, path)

    def get_children(self, path: str = "") -> List[str]:
        """
        Get the distinct immediate child segments below path.

        Args:
            path: Parent key path ("" for the root).

        Returns:
            Child segment names, indices first in numeric order.
        """
        prefix = normalize_key(path) + KEY_DELIMITER if path else ""
        depth = len(path.split(KEY_DELIMITER)) if path else 0
        children: Dict[str, str] = {}

        for normalized, (original, _) in self._entries.items():
            if not normalized.startswith(prefix):
                continue
            segment = original.split(KEY_DELIMITER)[depth]
            if not segment:
                continue
            children.setdefault(normalize_key(segment), segment)

        return sorted(children.values(), key=_segment_sort_key)

    def has_children(self, path: str) -> bool:
        """Check whether any key lies below path."""
        prefix = normalize_key(path) + KEY_DELIMITER
        return any(normalized.startswith(prefix) for normalized in self._entries)

    def to_dict(self, path: str = "") -> Dict[str, Any]:
        """
        Rebuild a nested structure below path.

        Children whose segments are 0..n-1 become lists. A key that has
        both a value and children is shown with its children.
        """
        result: Dict[str, Any] = {}
        for child in self.get_children(path):
            child_path = combine_path(path, child)
            if child_path == path:
                continue
            if self.has_children(child_path):
                nested = self.to_dict(child_path)
                indices = list(nested.keys())
                if indices == [str(index) for index in range(len(indices))]:
                    result[child] = list(nested.values())
                else:
                    result[child] = nested
            else:
                result[child] = self.get(child_path)
        return result


class ConfigurationSection:
    """
    View of a configuration tree rooted at a key path.

    A lookup within a section equals a tree lookup at ``path:key``.
    """

    def __init__(self, tree: ConfigurationTree, path: str) -> None:
        self.tree = tree
        self.path = path

    @property
    def key(self) -> str:
        """Last segment of the section path."""
        return self.path.rsplit(KEY_DELIMITER, 1)[-1]

    @property
    def value(self) -> Optional[str]:
        """Value stored at the section path itself, if any."""
        return self.tree.get(self.path)

    def __getitem__(self, key: str) -> str:
        return self.tree[combine_path(self.path, key)]

    def __contains__(self, key: str) -> bool:
        return combine_path(self.path, key) in self.tree

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look up key relative to this section."""
        return self.tree.get(combine_path(self.path, key), default)

    def get_section(self, key: str) -> "ConfigurationSection":
        """Get a sub-section relative to this section."""
        return ConfigurationSection(self.tree, combine_path(self.path, key))

    def get_children(self) -> List["ConfigurationSection"]:
        """Get the immediate child sections."""
        return [self.get_section(child) for child in self.tree.get_children(self.path)]

    def exists(self) -> bool:
        """Check whether the section has a value or any children."""
        return self.value is not None or self.tree.has_children(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Nested structure below this section."""
        return self.tree.to_dict(self.path)

    def __repr__(self) -> str:
        return f"ConfigurationSection(path={self.path!r})"


class _JsonObject(list):
    """Ordered key/value pairs of a JSON object, duplicates preserved."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported JSON literal: {name}")


def _scalar_to_string(value: Any) -> str:
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def flatten_json(document: Any, source_name: str) -> Dict[str, str]:
    """
    Flatten a parsed JSON document into key paths.

    Args:
        document: Result of parsing with JSON objects as _JsonObject.
        source_name: Source identity for error messages.

    Returns:
        Flat key/value mapping in document order.

    Raises:
        ConfigParseError: If the root is not an object or a key repeats.
    """
    if not isinstance(document, _JsonObject):
        raise ConfigParseError(
            f"Top-level JSON element must be an object in {source_name}",
            source=source_name,
        )

    data: Dict[str, str] = {}
    seen: Dict[str, str] = {}

    def visit(node: Any, path: str) -> None:
        if isinstance(node, _JsonObject):
            for key, child in node:
                visit(child, combine_path(path, key))
        elif isinstance(node, list):
            for index, child in enumerate(node):
                visit(child, combine_path(path, str(index)))
        else:
            normalized = normalize_key(path)
            if normalized in seen:
                raise ConfigParseError(
                    f"A duplicate key '{path}' was found in {source_name}",
                    source=source_name,
                )
            seen[normalized] = path
            data[path] = _scalar_to_string(node)

    visit(document, "")
    return data


def load_json_source(source: ConfigurationSource) -> Dict[str, str]:
    """
    Read and flatten a JSON file source.

    Returns:
        Flat key/value mapping, empty for an absent optional file.

    Raises:
        MissingRequiredSourceError: If a required file is absent.
        ConfigParseError: If the file is not valid JSON.
    """
    if source.path is None:
        raise MissingRequiredSourceError(
            "File configuration source has no path",
            source=source.name,
        )

    try:
        with open(source.path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    except FileNotFoundError:
        if source.optional:
            return {}
        raise MissingRequiredSourceError(
            f"Required configuration file not found: {source.path}",
            source=source.name,
        )
    except UnicodeDecodeError as e:
        raise ConfigParseError(
            f"Configuration file is not valid UTF-8: {source.name}",
            source=source.name,
        ) from e

    try:
        document = json.loads(
            text,
            object_pairs_hook=_JsonObject,
            parse_int=str,
            parse_float=str,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as e:
        raise ConfigParseError(
            f"Could not parse {source.name}: {e.msg}",
            source=source.name,
            line=e.lineno,
            column=e.colno,
        ) from e
    except ValueError as e:
        raise ConfigParseError(
            f"Could not parse {source.name}: {e}",
            source=source.name,
        ) from e

    return flatten_json(document, source.name)


def load_environment_source(
    source: ConfigurationSource,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Flatten environment variables into key paths.

    A double underscore in a variable name is the hierarchy delimiter,
    so ``AppSettings__MySetting`` sets ``AppSettings:MySetting``.
    """
    if environ is None:
        environ = os.environ

    prefix = normalize_key(source.prefix)
    data: Dict[str, str] = {}

    for name, value in environ.items():
        if prefix and not normalize_key(name).startswith(prefix):
            continue
        key = name[len(source.prefix):].replace(ENVIRONMENT_DELIMITER, KEY_DELIMITER)
        if not key or "" in key.split(KEY_DELIMITER):
            # e.g. __CF_USER_TEXT_ENCODING, which no lookup can address
            logger.debug(f"Skipping environment variable with an empty key segment: {name}")
            continue
        data[key] = value

    return data


def load_source(
    source: ConfigurationSource,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Flatten a single source of either kind."""
    if source.kind is SourceKind.ENVIRONMENT:
        return load_environment_source(source, environ)
    return load_json_source(source)


def build_configuration_tree(
    sources: Iterable[ConfigurationSource],
    environ: Optional[Mapping[str, str]] = None,
) -> ConfigurationTree:
    """
    Merge sources into a single configuration tree.

    Sources are applied in order; later sources overwrite earlier ones
    for the same (case-insensitive) key.

    Args:
        sources: Sources in ascending priority order.
        environ: Environment snapshot for environment sources.

    Returns:
        Immutable configuration tree.

    Raises:
        MissingRequiredSourceError: If a required file is absent.
        ConfigParseError: If any file fails to parse.
    """
    merged: Dict[str, Tuple[str, str]] = {}

    for source in sources:
        layer = load_source(source, environ)
        logger.debug(f"Loaded {len(layer)} keys from {source.name}")
        for key, value in layer.items():
            normalized = normalize_key(key)
            original = merged[normalized][0] if normalized in merged else key
            merged[normalized] = (original, value)

    return ConfigurationTree(merged.values())
