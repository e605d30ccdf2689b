"""Typed records shared across ingestion, filtering and aggregation."""

from .geography import GeographyUnit
from .player import InternationalPlayerRecord, PlayerRecord, birth_decade
from .population import PopulationRecord
from .validation import (
    DataValidationSummary,
    InternationalValidation,
    PlayerValidation,
    PopulationValidation,
)

__all__ = [
    "GeographyUnit",
    "PlayerRecord",
    "InternationalPlayerRecord",
    "PopulationRecord",
    "birth_decade",
    "DataValidationSummary",
    "PlayerValidation",
    "PopulationValidation",
    "InternationalValidation",
]
