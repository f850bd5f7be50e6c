"""
Core infrastructure package for the GEO metrics backend.

Provides:
- Configuration management via pydantic-settings
- Async PostgreSQL database connectivity via asyncpg
- FastAPI dependency injection utilities

Re-exports key components so other modules can write:

    from geo_backend.core import get_settings, get_db_pool, SettingsDep
"""

from geo_backend.core.config import Settings, get_settings
from geo_backend.core.database import init_db, close_db, get_db_pool
from geo_backend.core.dependencies import get_settings_dependency, SettingsDep

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Database pool lifecycle (from database.py)
    'init_db',
    'close_db',
    'get_db_pool',
    # FastAPI dependency injection (from dependencies.py)
    'get_settings_dependency',
    'SettingsDep',
]
