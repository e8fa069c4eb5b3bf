"""
Demo services that read configuration and log the values.
"""

from appsettings_edu.services.base_service import BaseService
from appsettings_edu.services.some_service import SomeService
from appsettings_edu.services.some_second_service import SomeSecondService
from appsettings_edu.services.static_values import StaticValues

__all__ = [
    "BaseService",
    "SomeService",
    "SomeSecondService",
    "StaticValues",
]
