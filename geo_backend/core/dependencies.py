"""
FastAPI dependency injection module for the GEO metrics backend.

Keeps endpoint handlers decoupled from the settings singleton so tests can
hand them a mock instead.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints

Usage Examples:
    @router.post("/calculate-geo-metrics")
    async def calculate_geo_metrics(request: BrandCalculationRequest, settings: SettingsDep):
        window = settings.scoring_window_days

In tests:
    app.dependency_overrides[get_settings_dependency] = lambda: mock_settings
"""

from typing import Annotated

from fastapi import Depends

from geo_backend.core.config import Settings, get_settings


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    Thin wrapper around get_settings() so FastAPI's dependency override
    mechanism can replace it in tests.
    """
    return get_settings()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
