"""Country reference data, raw-value aliases and world-map display names."""

from __future__ import annotations

from typing import Mapping, Optional, Tuple

from warmap.models import GeographyUnit

# Raw birth-country variants found in player registries.
COUNTRY_ALIASES: Mapping[str, str] = {
    "USA": "United States",
    "U.S.A.": "United States",
    "CAN": "Canada",
    "D.R.": "Dominican Republic",
    "P.R.": "Puerto Rico",
    "V.I.": "U.S. Virgin Islands",
    "UK": "United Kingdom",
    "U.K.": "United Kingdom",
    "Korea": "South Korea",
    "Republic of Korea": "South Korea",
    "Holland": "Netherlands",
    "The Netherlands": "Netherlands",
    "Curaçao": "Curacao",
    "Czechia": "Czech Republic",
    "Vietnam": "Viet Nam",
}

_UNITED_STATES_TOKENS = frozenset({"USA", "UNITED STATES", "U.S.A.", "US", "U.S."})

# Canonical name -> world-map feature name. ``None`` means the unit has no
# shape in the map dataset.
COUNTRY_FEATURE_OVERRIDES: Mapping[str, Optional[str]] = {
    "Czech Republic": "Czechia",
    "Dominican Republic": "Dominican Rep.",
    "Viet Nam": "Vietnam",
    "Curacao": None,
    "American Samoa": None,
    "U.S. Virgin Islands": None,
    "Guam": None,
    "Aruba": None,
    "Singapore": None,
    "At Sea": None,
}

# (canonical name, ISO 3166-1 alpha-3 code or None)
_COUNTRY_ROWS: Tuple[Tuple[str, Optional[str]], ...] = (
    ("Afghanistan", "AFG"),
    ("American Samoa", "ASM"),
    ("Aruba", "ABW"),
    ("At Sea", None),
    ("Australia", "AUS"),
    ("Austria", "AUT"),
    ("Bahamas", "BHS"),
    ("Belgium", "BEL"),
    ("Belize", "BLZ"),
    ("Brazil", "BRA"),
    ("Canada", "CAN"),
    ("China", "CHN"),
    ("Colombia", "COL"),
    ("Cuba", "CUB"),
    ("Curacao", "CUW"),
    ("Czech Republic", "CZE"),
    ("Denmark", "DNK"),
    ("Dominican Republic", "DOM"),
    ("Finland", "FIN"),
    ("France", "FRA"),
    ("Germany", "DEU"),
    ("Greece", "GRC"),
    ("Guam", "GUM"),
    ("Honduras", "HND"),
    ("Hong Kong", "HKG"),
    ("Indonesia", "IDN"),
    ("Ireland", "IRL"),
    ("Italy", "ITA"),
    ("Jamaica", "JAM"),
    ("Japan", "JPN"),
    ("Latvia", "LVA"),
    ("Lithuania", "LTU"),
    ("Mexico", "MEX"),
    ("Netherlands", "NLD"),
    ("Nicaragua", "NIC"),
    ("Norway", "NOR"),
    ("Panama", "PAN"),
    ("Peru", "PER"),
    ("Philippines", "PHL"),
    ("Poland", "POL"),
    ("Portugal", "PRT"),
    ("Puerto Rico", "PRI"),
    ("Russia", "RUS"),
    ("Saudi Arabia", "SAU"),
    ("Singapore", "SGP"),
    ("Slovakia", "SVK"),
    ("South Africa", "ZAF"),
    ("South Korea", "KOR"),
    ("Spain", "ESP"),
    ("Sweden", "SWE"),
    ("Switzerland", "CHE"),
    ("Taiwan", "TWN"),
    ("U.S. Virgin Islands", "VIR"),
    ("Ukraine", "UKR"),
    ("United Kingdom", "GBR"),
    ("Venezuela", "VEN"),
    ("Viet Nam", "VNM"),
)


def resolve_country_feature_name(country: str) -> Optional[str]:
    """Map a canonical country name to its world-map feature name."""

    if country in COUNTRY_FEATURE_OVERRIDES:
        return COUNTRY_FEATURE_OVERRIDES[country]
    return country


def country_unit(name: str, code: Optional[str] = None) -> GeographyUnit:
    return GeographyUnit(
        kind="country",
        name=name,
        code=code,
        key=name,
        feature_name=resolve_country_feature_name(name),
    )


COUNTRIES: Tuple[GeographyUnit, ...] = tuple(country_unit(name, code) for name, code in _COUNTRY_ROWS)


def normalize_country_name(value: Optional[str]) -> Optional[str]:
    """Apply the alias table to a raw country value; blank input gives ``None``."""

    if value is None:
        return None
    trimmed = str(value).strip()
    if not trimmed:
        return None
    alias = COUNTRY_ALIASES.get(trimmed) or COUNTRY_ALIASES.get(trimmed.upper())
    return alias or trimmed


def is_united_states(value: Optional[str]) -> bool:
    if not value:
        return False
    return str(value).strip().upper() in _UNITED_STATES_TOKENS or normalize_country_name(value) == "United States"

