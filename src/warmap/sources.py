"""Dataset sources: remote sample/bundled files over HTTP and packaged JSON."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import httpx

from warmap.config import (
    BUNDLED_INTERNATIONAL_PATH,
    BUNDLED_PLAYERS_PATH,
    BUNDLED_POPULATION_PATH,
    SAMPLE_PLAYERS_PATH,
    SAMPLE_POPULATION_PATH,
)
from warmap.ingest import (
    parse_international_players_json,
    parse_players_json,
    parse_population_json,
)
from warmap.models import (
    DataValidationSummary,
    InternationalPlayerRecord,
    PlayerRecord,
    PopulationRecord,
)
from warmap.reference import CountryResolver


logger = logging.getLogger(__name__)

PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"


class SourceUnavailableError(RuntimeError):
    """Raised when a dataset cannot be fetched or decoded."""


@dataclass(frozen=True)
class SampleTexts:
    players_text: str
    population_text: str


@dataclass(frozen=True)
class BundledDatasets:
    players: List[PlayerRecord] = field(default_factory=list)
    international_players: List[InternationalPlayerRecord] = field(default_factory=list)
    populations: List[PopulationRecord] = field(default_factory=list)
    validation: DataValidationSummary = field(default_factory=DataValidationSummary)


def _parse_bundled(
    players_payload: Any,
    international_payload: Any,
    population_payload: Any,
    *,
    resolver: CountryResolver | None = None,
) -> BundledDatasets:
    players, player_summary = parse_players_json(players_payload)
    international, international_summary = parse_international_players_json(
        international_payload, resolver=resolver
    )
    populations, population_summary = parse_population_json(population_payload)
    return BundledDatasets(
        players=players,
        international_players=international,
        populations=populations,
        validation=DataValidationSummary(
            players=player_summary,
            populations=population_summary,
            international=international_summary,
        ),
    )


class DatasetLoader:
    """Fetch datasets relative to ``base_url``; failures raise :class:`SourceUnavailableError`.

    There is no retry: a failed request is reported once and the caller keeps
    whatever it had loaded before.
    """

    def __init__(self, client: httpx.AsyncClient, *, base_url: Optional[str] = None):
        self.client = client
        self.base_url = base_url or ""

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}" if self.base_url else path

    async def fetch_text(self, path: str) -> str:
        url = self._url(path)
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Unable to fetch %s: %s", url, exc)
            raise SourceUnavailableError(f"Unable to fetch {url}") from exc
        return response.text

    async def fetch_json(self, path: str) -> Any:
        text = await self.fetch_text(path)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Invalid JSON from %s: %s", self._url(path), exc)
            raise SourceUnavailableError(f"Invalid JSON in {self._url(path)}") from exc

    async def load_sample(self) -> SampleTexts:
        players_text, population_text = await asyncio.gather(
            self.fetch_text(SAMPLE_PLAYERS_PATH),
            self.fetch_text(SAMPLE_POPULATION_PATH),
        )
        return SampleTexts(players_text=players_text, population_text=population_text)

    async def load_bundled(self, *, resolver: CountryResolver | None = None) -> BundledDatasets:
        players_payload, international_payload, population_payload = await asyncio.gather(
            self.fetch_json(BUNDLED_PLAYERS_PATH),
            self.fetch_json(BUNDLED_INTERNATIONAL_PATH),
            self.fetch_json(BUNDLED_POPULATION_PATH),
        )
        return _parse_bundled(
            players_payload, international_payload, population_payload, resolver=resolver
        )


def _read_packaged(relative: str, data_dir: Path) -> str:
    # Packaged paths mirror the served layout without the leading "data/".
    path = data_dir / Path(relative).name if relative.startswith("data/") else data_dir / relative
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceUnavailableError(f"Packaged dataset {path} is unavailable") from exc


def _read_packaged_json(relative: str, data_dir: Path) -> Any:
    text = _read_packaged(relative, data_dir)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SourceUnavailableError(f"Packaged dataset {relative} is not valid JSON") from exc


def load_packaged_sample(data_dir: Path = PACKAGE_DATA_DIR) -> SampleTexts:
    return SampleTexts(
        players_text=_read_packaged(SAMPLE_PLAYERS_PATH, data_dir),
        population_text=_read_packaged(SAMPLE_POPULATION_PATH, data_dir),
    )


def load_packaged_datasets(
    data_dir: Path = PACKAGE_DATA_DIR, *, resolver: CountryResolver | None = None
) -> BundledDatasets:
    """Parse the JSON datasets shipped inside the package."""

    return _parse_bundled(
        _read_packaged_json(BUNDLED_PLAYERS_PATH, data_dir),
        _read_packaged_json(BUNDLED_INTERNATIONAL_PATH, data_dir),
        _read_packaged_json(BUNDLED_POPULATION_PATH, data_dir),
        resolver=resolver,
    )


__all__ = [
    "BundledDatasets",
    "DatasetLoader",
    "PACKAGE_DATA_DIR",
    "SampleTexts",
    "SourceUnavailableError",
    "load_packaged_datasets",
    "load_packaged_sample",
]
