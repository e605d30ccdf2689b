from pathlib import Path

import anyio
import httpx
import pytest

from warmap.config import PLAYERS_STORAGE_KEY, POPULATION_STORAGE_KEY, Settings
from warmap.filters import Filters
from warmap.persistence import CsvCache
from warmap.sources import (
    PACKAGE_DATA_DIR,
    DatasetLoader,
    SampleTexts,
    SourceUnavailableError,
    load_packaged_datasets,
)
from warmap.store import DataStore

PLAYERS_CSV = (
    "player_id,full_name,birth_state,birth_year,war_career\n"
    "a,Alpha,CA,1950,10.0\n"
    "b,Beta,CA,1965,-2.0\n"
    "c,Gamma,NY,1970,4.0\n"
)
NEWER_PLAYERS_CSV = "player_id,full_name,birth_state,birth_year,war_career\nz,Zed,TX,1980,1.0\n"
POPULATION_CSV = "state,year,population\nCA,1950,10000000\nCA,1970,20000000\n"


@pytest.fixture
def settings() -> Settings:
    return Settings(db_path=None, data_url=None, strict_countries=False, default_min_year=1850)


@pytest.fixture
def cache(tmp_path: Path) -> CsvCache:
    return CsvCache(tmp_path / "store.sqlite")


@pytest.fixture
def store(cache: CsvCache, settings: Settings) -> DataStore:
    return DataStore(cache=cache, settings=settings)


class _GatedLoader:
    def __init__(self, texts: SampleTexts, gate: anyio.Event | None = None):
        self.texts = texts
        self.gate = gate
        self.started = anyio.Event()

    async def load_sample(self) -> SampleTexts:
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        return self.texts


def _packaged_transport(status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if status_code != 200:
            return httpx.Response(status_code, text="unavailable")
        relative = request.url.path.lstrip("/")
        if relative.startswith("data/"):
            relative = relative[len("data/"):]
        path = PACKAGE_DATA_DIR / relative
        if not path.exists():
            return httpx.Response(404)
        return httpx.Response(200, text=path.read_text(encoding="utf-8"))

    return httpx.MockTransport(handler)


def test_loading_players_resets_year_filters_to_data(store: DataStore):
    summary = store.load_players_text(PLAYERS_CSV)

    assert summary.accepted == 3
    assert store.snapshot.filters.min_year == 1950
    assert store.snapshot.filters.max_year == 1970
    assert store.decades() == [1950, 1960, 1970]


def test_every_change_produces_a_new_snapshot(store: DataStore):
    before = store.snapshot
    store.load_players_text(PLAYERS_CSV)
    after = store.snapshot

    assert after is not before
    assert after.version > before.version
    assert before.players == ()


def test_state_aggregates_from_snapshot(store: DataStore):
    store.load_players_text(PLAYERS_CSV)
    store.load_population_text(POPULATION_CSV)
    store.set_filters(lambda filters: Filters(min_year=1900, max_year=2000, min_war=-100.0))

    aggregates = store.state_aggregates()

    assert [aggregate.state.code for aggregate in aggregates] == ["CA", "NY"]
    assert aggregates[0].total_war == 8.0
    assert [player.player_id for player in aggregates[0].players] == ["a", "b"]
    assert [a.state.code for a in store.state_aggregates(metric="war_per_million")] == ["CA"]
    assert store.snapshot.filters.selected_decade is None


def test_population_lookup_rebuilds_only_when_dataset_changes(store: DataStore):
    store.load_population_text(POPULATION_CSV)
    first = store.population_lookup

    store.set_filters(lambda filters: filters.with_decade(1950))
    assert store.population_lookup is first

    store.load_population_text("state,year,population\nTX,2000,20851820\n")
    assert store.population_lookup is not first
    assert store.population_lookup.states() == ["TX"]


def test_uploads_are_cached_and_restored(cache: CsvCache, settings: Settings):
    DataStore(cache=cache, settings=settings).load_players_text(PLAYERS_CSV)
    DataStore(cache=cache, settings=settings).load_population_text(POPULATION_CSV)

    restored = DataStore(cache=cache, settings=settings)

    assert cache.get(PLAYERS_STORAGE_KEY) == PLAYERS_CSV
    assert cache.get(POPULATION_STORAGE_KEY) == POPULATION_CSV
    assert len(restored.snapshot.players) == 3
    assert len(restored.snapshot.populations) == 2


def test_clear_resets_snapshot_and_cache(store: DataStore, cache: CsvCache):
    store.load_players_text(PLAYERS_CSV)

    store.clear()

    assert store.snapshot.players == ()
    assert store.state_aggregates() == []
    assert cache.keys() == []


@pytest.mark.anyio
async def test_superseded_load_is_discarded(store: DataStore):
    gate = anyio.Event()
    slow = _GatedLoader(SampleTexts(PLAYERS_CSV, POPULATION_CSV), gate)
    fast = _GatedLoader(SampleTexts(NEWER_PLAYERS_CSV, POPULATION_CSV))
    results = []

    async def run_slow() -> None:
        results.append(await store.load_sample(slow))  # type: ignore[arg-type]

    async with anyio.create_task_group() as tg:
        tg.start_soon(run_slow)
        await slow.started.wait()
        assert await store.load_sample(fast) is True  # type: ignore[arg-type]
        gate.set()

    assert results == [False]
    assert [player.player_id for player in store.snapshot.players] == ["z"]


@pytest.mark.anyio
async def test_sample_load_over_http(store: DataStore):
    async with httpx.AsyncClient(transport=_packaged_transport()) as client:
        loader = DatasetLoader(client, base_url="https://data.test/")
        assert await store.load_sample(loader) is True

    validation = store.snapshot.validation
    assert validation.players.row_count == 13
    assert validation.players.accepted == 11
    assert validation.players.missing_state == 1
    assert validation.players.rejected == 1
    assert validation.populations.row_count == 33
    assert validation.populations.accepted == 32
    assert validation.populations.rejected == 1


@pytest.mark.anyio
async def test_bundled_load_over_http(store: DataStore):
    async with httpx.AsyncClient(transport=_packaged_transport()) as client:
        loader = DatasetLoader(client, base_url="https://data.test/")
        assert await store.load_bundled(loader) is True

    snapshot = store.snapshot
    assert len(snapshot.players) == 20
    assert len(snapshot.international_players) == 14
    assert len(snapshot.populations) == 32
    assert store.country_aggregates()[0].country == "Dominican Republic"


@pytest.mark.anyio
async def test_failed_fetch_keeps_previous_data(store: DataStore):
    store.load_players_text(PLAYERS_CSV)
    before = store.snapshot

    async with httpx.AsyncClient(transport=_packaged_transport(status_code=503)) as client:
        loader = DatasetLoader(client, base_url="https://data.test/")
        with pytest.raises(SourceUnavailableError):
            await store.load_sample(loader)

    assert store.snapshot is before
    assert store.error is not None


def test_packaged_datasets_match_bundled_files():
    datasets = load_packaged_datasets()

    assert datasets.validation.players.accepted == 20
    assert datasets.validation.international.accepted == 14
    assert datasets.validation.populations.accepted == 32
    assert {record.state for record in datasets.populations} == {"AL", "CA", "GA", "NJ", "NY", "OH", "PA", "TX"}
