from __future__ import annotations

from pydantic import BaseModel, model_validator


class FiltersPayload(BaseModel):
    """Partial filter update; omitted fields keep their current value."""

    min_year: int | None = None
    max_year: int | None = None
    min_war: float | None = None
    selected_decade: int | None = None
    all_decades: bool = False
    league: str | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "FiltersPayload":
        if self.min_year is not None and self.max_year is not None and self.min_year > self.max_year:
            raise ValueError("min_year must not exceed max_year")
        if self.selected_decade is not None and self.selected_decade % 10 != 0:
            raise ValueError("selected_decade must be a multiple of 10")
        return self


class FiltersResponse(BaseModel):
    min_year: int
    max_year: int
    min_war: float
    selected_decade: int | None
    league: str
