"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    AppConfig,
    Category,
    ExportConfig,
    GeolocationConfig,
    RetrievalConfig,
)

__all__ = [
    "AppConfig",
    "Category",
    "ConfigLocator",
    "ConfigRepository",
    "ExportConfig",
    "GeolocationConfig",
    "RetrievalConfig",
]
