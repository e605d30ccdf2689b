"""Pydantic models for API I/O."""

from .aggregate import (
    CountryAggregateListResponse,
    CountryAggregateResponse,
    PlayerResponse,
    StateAggregateListResponse,
    StateAggregateResponse,
)
from .filters import FiltersPayload, FiltersResponse
from .validation import (
    InternationalValidationResponse,
    PlayerValidationResponse,
    PopulationValidationResponse,
    ValidationResponse,
)

__all__ = [
    "CountryAggregateListResponse",
    "CountryAggregateResponse",
    "FiltersPayload",
    "FiltersResponse",
    "InternationalValidationResponse",
    "PlayerResponse",
    "PlayerValidationResponse",
    "PopulationValidationResponse",
    "StateAggregateListResponse",
    "StateAggregateResponse",
    "ValidationResponse",
]
