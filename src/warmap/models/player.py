"""Canonical player models shared across ingestion and aggregation layers."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, computed_field
from pydantic.config import ConfigDict


def birth_decade(year: int) -> int:
    return (year // 10) * 10


class PlayerRecord(BaseModel):
    """Domestic player: birthplace is a raw state string resolved on demand."""

    player_id: str = Field(..., min_length=1)
    full_name: str
    birth_year: int
    birth_state_raw: str
    war_career: float

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def birth_decade(self) -> int:
        return birth_decade(self.birth_year)


class InternationalPlayerRecord(BaseModel):
    """Player born outside the United States, keyed by canonical country."""

    player_id: str = Field(..., min_length=1)
    full_name: str
    birth_year: int
    birth_country: str = Field(..., min_length=1)
    birth_country_raw: Optional[str] = None
    birth_city: Optional[str] = None
    war_career: float

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def birth_decade(self) -> int:
        return birth_decade(self.birth_year)
