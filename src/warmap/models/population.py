from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PopulationRecord(BaseModel):
    """Resident population of one state in one year."""

    state: str = Field(..., min_length=1)
    year: int
    population: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)
