"""
Pytest configuration and fixtures for appsettings-edu tests.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest

from appsettings_edu.config.logging_config import shutdown_logging


BASE_SETTINGS: Dict[str, Any] = {
    "AppSettings": {
        "MySetting": "base value",
        "BaseOnly": "only in base",
        "MainSetting": {"SubSetting": "base sub value"},
        "SomeInt": 42,
        "SomeBool": True,
        "Somedecimal": 3.14,
        "SomeSettingsModel": {
            "ModelSetting": "x",
            "SomeSubSettingsModel": {"MyModelSubSettingString": "sub string"},
        },
        "Hosts": ["alpha", "beta"],
    },
    "ConnectionStrings": {"Default": "Server=base;Database=Demo"},
}

DEVELOPMENT_SETTINGS: Dict[str, Any] = {
    "AppSettings": {
        "MySetting": "overlay value",
        "OverlayOnly": "only in overlay",
    },
    "ConnectionStrings": {"Default": "Server=dev;Database=Demo"},
}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_json(temp_dir: Path) -> Callable[[str, Any], Path]:
    """Return a helper writing a JSON document into temp_dir."""

    def _write(name: str, document: Any) -> Path:
        path = temp_dir / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_dir(temp_dir: Path, write_json: Callable[[str, Any], Path]) -> Path:
    """Create a directory with base and Development settings files."""
    write_json("appsettings.json", BASE_SETTINGS)
    write_json("appsettings.Development.json", DEVELOPMENT_SETTINGS)
    return temp_dir


@pytest.fixture
def production_environ() -> Dict[str, str]:
    """Environment snapshot without an environment name."""
    return {"PATH": "/usr/bin"}


@pytest.fixture
def development_environ() -> Dict[str, str]:
    """Environment snapshot selecting the Development overlay."""
    return {"PATH": "/usr/bin", "HOSTING_ENVIRONMENT": "Development"}


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Remove handlers added to the package logger by a test."""
    yield
    shutdown_logging()


# Markers for test categorization
def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
