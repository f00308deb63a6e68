"""
Core module initialization.
Exports configuration, logging and error taxonomy.
"""

from restaurant_admin.core.config import get_settings, setup_logging, Settings, EnvironmentMode
from restaurant_admin.core.exceptions import (
    RestaurantAdminError,
    ValidationError,
    NotFoundError,
    PersistenceError,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "RestaurantAdminError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
]
