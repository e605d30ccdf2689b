from __future__ import annotations

from pydantic import BaseModel, Field


class PlayerValidationResponse(BaseModel):
    row_count: int = 0
    accepted: int = 0
    rejected: int = 0
    missing_state: int = 0


class PopulationValidationResponse(BaseModel):
    row_count: int = 0
    accepted: int = 0
    rejected: int = 0


class InternationalValidationResponse(BaseModel):
    row_count: int = 0
    accepted: int = 0
    rejected: int = 0


class ValidationResponse(BaseModel):
    players: PlayerValidationResponse = Field(default_factory=PlayerValidationResponse)
    populations: PopulationValidationResponse = Field(default_factory=PopulationValidationResponse)
    international: InternationalValidationResponse = Field(default_factory=InternationalValidationResponse)
    error: str | None = None
    version: int = 0
