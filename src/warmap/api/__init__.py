"""REST API exposing the birthplace WAR aggregates."""

from __future__ import annotations

import logging
from dataclasses import asdict, replace
from typing import Callable, Literal, Optional

import httpx
from fastapi import Body, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from warmap.aggregate import (
    CountryAggregate,
    StateAggregate,
    export_country_aggregates_to_csv,
    export_state_aggregates_to_csv,
)
from warmap.api.schemas import (
    CountryAggregateListResponse,
    CountryAggregateResponse,
    FiltersPayload,
    FiltersResponse,
    PlayerResponse,
    StateAggregateListResponse,
    StateAggregateResponse,
    ValidationResponse,
)
from warmap.config import get_settings
from warmap.filters import Filters
from warmap.models import InternationalPlayerRecord, PlayerRecord
from warmap.persistence import CsvCache
from warmap.sources import (
    DatasetLoader,
    SourceUnavailableError,
    load_packaged_datasets,
    load_packaged_sample,
)
from warmap.store import DataStore


logger = logging.getLogger("uvicorn.error")

ClientFactory = Callable[[], httpx.AsyncClient]


def _player_to_response(player: PlayerRecord | InternationalPlayerRecord) -> PlayerResponse:
    if isinstance(player, InternationalPlayerRecord):
        return PlayerResponse(
            player_id=player.player_id,
            full_name=player.full_name,
            birth_year=player.birth_year,
            birth_decade=player.birth_decade,
            war_career=player.war_career,
            birth_country=player.birth_country,
            birth_city=player.birth_city,
        )
    return PlayerResponse(
        player_id=player.player_id,
        full_name=player.full_name,
        birth_year=player.birth_year,
        birth_decade=player.birth_decade,
        war_career=player.war_career,
        birth_state=player.birth_state_raw,
    )


def _state_to_response(rank: int, aggregate: StateAggregate, player_limit: int | None) -> StateAggregateResponse:
    players = aggregate.players if player_limit is None else aggregate.players[:player_limit]
    return StateAggregateResponse(
        rank=rank,
        state=aggregate.state.name,
        postal=aggregate.state.code or "",
        fips=aggregate.fips,
        total_war=aggregate.total_war,
        player_count=aggregate.player_count,
        war_per_million=aggregate.war_per_million,
        players=[_player_to_response(player) for player in players],
    )


def _country_to_response(
    rank: int, aggregate: CountryAggregate, player_limit: int | None
) -> CountryAggregateResponse:
    players = aggregate.players if player_limit is None else aggregate.players[:player_limit]
    return CountryAggregateResponse(
        rank=rank,
        country=aggregate.country,
        code=aggregate.unit.code,
        map_feature=aggregate.feature_name,
        total_war=aggregate.total_war,
        player_count=aggregate.player_count,
        average_war=aggregate.average_war,
        players=[_player_to_response(player) for player in players],
    )


def _filters_to_response(filters: Filters) -> FiltersResponse:
    return FiltersResponse(**asdict(filters))


def _apply_filters_payload(filters: Filters, payload: FiltersPayload) -> Filters:
    updates = payload.model_dump(exclude_unset=True, exclude={"all_decades"})
    if payload.all_decades:
        updates["selected_decade"] = None
    changes = {
        key: value
        for key, value in updates.items()
        if key == "selected_decade" or value is not None
    }
    updated = replace(filters, **changes)
    if updated.min_year > updated.max_year:
        raise HTTPException(status_code=400, detail="min_year must not exceed max_year")
    return updated


async def _read_upload(upload: UploadFile) -> str:
    contents = await upload.read()
    try:
        return contents.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"{upload.filename or 'upload'} is not UTF-8 text") from exc


def create_app(
    *,
    store: DataStore | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    app = FastAPI(title="warmap")
    if store is None:
        settings = get_settings()
        store = DataStore(cache=CsvCache(settings.db_path), settings=settings)
    app.state.data_store = store
    data_url = store.settings.data_url

    def make_client() -> httpx.AsyncClient:
        if client_factory is not None:
            return client_factory()
        return httpx.AsyncClient(timeout=30.0)

    def validation_response() -> ValidationResponse:
        snapshot = store.snapshot
        payload = snapshot.validation.to_dict()
        return ValidationResponse(**payload, error=store.error, version=snapshot.version)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/players", response_model=ValidationResponse)
    async def upload_players(file: UploadFile = File(...)) -> ValidationResponse:
        text = await _read_upload(file)
        summary = store.load_players_text(text)
        logger.info("Loaded players file %s (%d accepted)", file.filename, summary.accepted)
        return validation_response()

    @app.post("/populations", response_model=ValidationResponse)
    async def upload_populations(file: UploadFile = File(...)) -> ValidationResponse:
        text = await _read_upload(file)
        summary = store.load_population_text(text)
        logger.info("Loaded population file %s (%d accepted)", file.filename, summary.accepted)
        return validation_response()

    @app.post("/international-players", response_model=ValidationResponse)
    async def upload_international(file: UploadFile = File(...)) -> ValidationResponse:
        text = await _read_upload(file)
        summary = store.load_international_text(text)
        logger.info("Loaded international file %s (%d accepted)", file.filename, summary.accepted)
        return validation_response()

    @app.post("/sample", response_model=ValidationResponse)
    async def load_sample() -> ValidationResponse:
        if not data_url:
            try:
                texts = load_packaged_sample()
            except SourceUnavailableError as exc:
                store.error = str(exc)
                raise HTTPException(status_code=502, detail=str(exc)) from exc
            store.load_players_text(texts.players_text)
            store.load_population_text(texts.population_text)
            return validation_response()
        async with make_client() as client:
            loader = DatasetLoader(client, base_url=data_url)
            try:
                await store.load_sample(loader)
            except SourceUnavailableError as exc:
                raise HTTPException(status_code=502, detail=str(exc)) from exc
        return validation_response()

    @app.post("/bundled", response_model=ValidationResponse)
    async def load_bundled() -> ValidationResponse:
        if not data_url:
            try:
                store.apply_bundled(load_packaged_datasets(resolver=store.resolver))
            except SourceUnavailableError as exc:
                store.error = str(exc)
                raise HTTPException(status_code=502, detail=str(exc)) from exc
            return validation_response()
        async with make_client() as client:
            loader = DatasetLoader(client, base_url=data_url)
            try:
                await store.load_bundled(loader)
            except SourceUnavailableError as exc:
                raise HTTPException(status_code=502, detail=str(exc)) from exc
        return validation_response()

    @app.get("/validation", response_model=ValidationResponse)
    async def get_validation() -> ValidationResponse:
        return validation_response()

    @app.get("/filters", response_model=FiltersResponse)
    async def get_filters() -> FiltersResponse:
        return _filters_to_response(store.snapshot.filters)

    @app.put("/filters", response_model=FiltersResponse)
    async def update_filters(payload: FiltersPayload = Body(...)) -> FiltersResponse:
        filters = store.set_filters(lambda current: _apply_filters_payload(current, payload))
        return _filters_to_response(filters)

    @app.get("/international/filters", response_model=FiltersResponse)
    async def get_international_filters() -> FiltersResponse:
        return _filters_to_response(store.snapshot.international_filters)

    @app.put("/international/filters", response_model=FiltersResponse)
    async def update_international_filters(payload: FiltersPayload = Body(...)) -> FiltersResponse:
        filters = store.set_international_filters(
            lambda current: _apply_filters_payload(current, payload)
        )
        return _filters_to_response(filters)

    @app.get("/decades")
    async def decades() -> dict[str, list[int]]:
        return {
            "domestic": store.decades(),
            "international": store.international_decades(),
        }

    @app.get("/aggregates/states", response_model=StateAggregateListResponse)
    async def state_aggregates(
        metric: Literal["total_war", "war_per_million"] = Query("total_war"),
        decade: Optional[int] = Query(None),
        limit: Optional[int] = Query(None, ge=1),
        player_limit: Optional[int] = Query(None, ge=0),
    ) -> StateAggregateListResponse:
        aggregates = store.state_aggregates(metric=metric, decade=decade)
        if limit is not None:
            aggregates = aggregates[:limit]
        return StateAggregateListResponse(
            metric=metric,
            decade=decade,
            aggregates=[
                _state_to_response(rank, aggregate, player_limit)
                for rank, aggregate in enumerate(aggregates, start=1)
            ],
        )

    @app.get("/aggregates/states.csv")
    async def state_aggregates_csv(
        metric: Literal["total_war", "war_per_million"] = Query("total_war"),
        decade: Optional[int] = Query(None),
    ) -> Response:
        content = export_state_aggregates_to_csv(store.state_aggregates(metric=metric, decade=decade))
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=state_war.csv"},
        )

    @app.get("/aggregates/countries", response_model=CountryAggregateListResponse)
    async def country_aggregates(
        decade: Optional[int] = Query(None),
        limit: Optional[int] = Query(None, ge=1),
        player_limit: Optional[int] = Query(None, ge=0),
    ) -> CountryAggregateListResponse:
        aggregates = store.country_aggregates(decade=decade)
        if limit is not None:
            aggregates = aggregates[:limit]
        return CountryAggregateListResponse(
            decade=decade,
            aggregates=[
                _country_to_response(rank, aggregate, player_limit)
                for rank, aggregate in enumerate(aggregates, start=1)
            ],
        )

    @app.get("/aggregates/countries.csv")
    async def country_aggregates_csv(decade: Optional[int] = Query(None)) -> Response:
        content = export_country_aggregates_to_csv(store.country_aggregates(decade=decade))
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=country_war.csv"},
        )

    @app.delete("/data", response_model=ValidationResponse)
    async def clear_data() -> ValidationResponse:
        store.clear()
        return validation_response()

    return app


__all__ = ["create_app"]
