"""Configuration helpers for runtime settings and dataset locations."""

from .settings import (
    BUNDLED_INTERNATIONAL_PATH,
    BUNDLED_PLAYERS_PATH,
    BUNDLED_POPULATION_PATH,
    PLAYERS_STORAGE_KEY,
    POPULATION_STORAGE_KEY,
    SAMPLE_PLAYERS_PATH,
    SAMPLE_POPULATION_PATH,
    Settings,
    get_settings,
)

__all__ = [
    "BUNDLED_INTERNATIONAL_PATH",
    "BUNDLED_PLAYERS_PATH",
    "BUNDLED_POPULATION_PATH",
    "PLAYERS_STORAGE_KEY",
    "POPULATION_STORAGE_KEY",
    "SAMPLE_PLAYERS_PATH",
    "SAMPLE_POPULATION_PATH",
    "Settings",
    "get_settings",
]
