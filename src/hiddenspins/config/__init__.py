"""Configuration module for Hidden Spins."""

from .settings import (
    DatabaseSettings,
    ImgBBSettings,
    ObservabilitySettings,
    Settings,
    StoreSettings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "ImgBBSettings",
    "ObservabilitySettings",
    "Settings",
    "StoreSettings",
    "get_settings",
]
