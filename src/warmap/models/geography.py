"""Canonical geography reference model."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class GeographyUnit(BaseModel):
    """A U.S. state or a country.

    ``key`` is what aggregates group on: the FIPS code for states and the
    canonical country name for countries. ``feature_name`` is the name of the
    matching shape in the world map; ``None`` marks units that have no shape
    but still count in tables.
    """

    kind: Literal["state", "country"]
    name: str = Field(..., min_length=1)
    code: Optional[str] = None
    key: str = Field(..., min_length=1)
    feature_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_shape(self) -> bool:
        return self.feature_name is not None
