"""Runtime settings read from ``WARMAP_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from typing import Optional


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "WARMAP_DB_PATH"
_DATA_URL_ENV = "WARMAP_DATA_URL"
_STRICT_COUNTRIES_ENV = "WARMAP_STRICT_COUNTRIES"
_MIN_YEAR_ENV = "WARMAP_DEFAULT_MIN_YEAR"

_DEFAULT_MIN_YEAR = 1850

PLAYERS_STORAGE_KEY = "war-birthplace-players"
POPULATION_STORAGE_KEY = "war-birthplace-population"

SAMPLE_PLAYERS_PATH = "sample-data/players_sample.csv"
SAMPLE_POPULATION_PATH = "sample-data/state_pop_sample.csv"
BUNDLED_PLAYERS_PATH = "data/players.json"
BUNDLED_INTERNATIONAL_PATH = "data/intplayers.json"
BUNDLED_POPULATION_PATH = "data/state-populations.json"


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    text = raw.strip().lower()
    if text in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "f", "no", "n", "off", ""}:
        return False
    logger.warning("Invalid flag for %s: %s; using default %s", name, raw, default)
    return default


@dataclass(frozen=True)
class Settings:
    db_path: Optional[str]
    data_url: Optional[str]
    strict_countries: bool
    default_min_year: int

    @property
    def default_max_year(self) -> int:
        return date.today().year

    @classmethod
    def from_env(cls) -> "Settings":
        data_url = os.getenv(_DATA_URL_ENV) or None
        if data_url and not data_url.endswith("/"):
            data_url = f"{data_url}/"
        return cls(
            db_path=os.getenv(_DB_PATH_ENV) or None,
            data_url=data_url,
            strict_countries=_env_flag(_STRICT_COUNTRIES_ENV),
            default_min_year=_env_int(_MIN_YEAR_ENV, _DEFAULT_MIN_YEAR, min_value=0),
        )


def get_settings() -> Settings:
    return Settings.from_env()
