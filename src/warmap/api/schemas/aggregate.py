from __future__ import annotations

from pydantic import BaseModel


class PlayerResponse(BaseModel):
    player_id: str
    full_name: str
    birth_year: int
    birth_decade: int
    war_career: float
    birth_state: str | None = None
    birth_country: str | None = None
    birth_city: str | None = None


class StateAggregateResponse(BaseModel):
    rank: int
    state: str
    postal: str
    fips: str
    total_war: float
    player_count: int
    war_per_million: float | None
    players: list[PlayerResponse]


class CountryAggregateResponse(BaseModel):
    rank: int
    country: str
    code: str | None
    map_feature: str | None
    total_war: float
    player_count: int
    average_war: float
    players: list[PlayerResponse]


class StateAggregateListResponse(BaseModel):
    metric: str
    decade: int | None
    aggregates: list[StateAggregateResponse]


class CountryAggregateListResponse(BaseModel):
    decade: int | None
    aggregates: list[CountryAggregateResponse]
