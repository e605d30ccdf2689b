"""Resolve free-text state and country values to canonical geography units."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from warmap.models import GeographyUnit

from .countries import COUNTRIES, country_unit, is_united_states, normalize_country_name
from .states import STATES


class GeographyIndex:
    """Case-insensitive lookup by short code, then by full name.

    Lookups never raise; anything unknown or blank resolves to ``None``.
    """

    def __init__(self, units: Iterable[GeographyUnit]):
        self._units = tuple(units)
        self._by_code: Dict[str, GeographyUnit] = {}
        self._by_name: Dict[str, GeographyUnit] = {}
        for unit in self._units:
            if unit.code:
                self._by_code.setdefault(unit.code.upper(), unit)
            self._by_name.setdefault(unit.name.lower(), unit)

    def __iter__(self):
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def resolve(self, value: Optional[str]) -> Optional[GeographyUnit]:
        if value is None:
            return None
        trimmed = str(value).strip()
        if not trimmed:
            return None
        code_match = self._by_code.get(trimmed.upper())
        if code_match is not None:
            return code_match
        return self._by_name.get(trimmed.lower())

    def get(self, value: str) -> GeographyUnit:
        """Strict variant of :meth:`resolve`, raising KeyError when missing."""

        unit = self.resolve(value)
        if unit is None:
            raise KeyError(f"No geography configured for {value!r}")
        return unit


STATE_INDEX = GeographyIndex(STATES)
COUNTRY_INDEX = GeographyIndex(COUNTRIES)


def find_state(value: Optional[str]) -> Optional[GeographyUnit]:
    return STATE_INDEX.resolve(value)


class CountryResolver:
    """Alias-normalise a raw birth country, then match it to a country unit.

    U.S. designators never resolve: those players belong to the state view.
    Countries missing from the reference list resolve to an ad-hoc unit keyed
    by the normalised name unless ``strict`` is set.
    """

    def __init__(self, index: GeographyIndex = COUNTRY_INDEX, *, strict: bool = False):
        self.index = index
        self.strict = strict

    def resolve(self, value: Optional[str]) -> Optional[GeographyUnit]:
        normalized = normalize_country_name(value)
        if normalized is None or is_united_states(value):
            return None
        unit = self.index.resolve(normalized)
        if unit is not None:
            return unit
        if self.strict:
            return None
        return country_unit(normalized)


def find_country(value: Optional[str], *, strict: bool = False) -> Optional[GeographyUnit]:
    return CountryResolver(strict=strict).resolve(value)
