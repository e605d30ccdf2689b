"""Reference data for states and countries."""

from .countries import (
    COUNTRIES,
    COUNTRY_ALIASES,
    COUNTRY_FEATURE_OVERRIDES,
    is_united_states,
    normalize_country_name,
    resolve_country_feature_name,
)
from .resolver import (
    COUNTRY_INDEX,
    STATE_INDEX,
    CountryResolver,
    GeographyIndex,
    find_country,
    find_state,
)
from .states import STATE_FIPS_CODES, STATES

__all__ = [
    "COUNTRIES",
    "COUNTRY_ALIASES",
    "COUNTRY_FEATURE_OVERRIDES",
    "COUNTRY_INDEX",
    "STATES",
    "STATE_FIPS_CODES",
    "STATE_INDEX",
    "CountryResolver",
    "GeographyIndex",
    "find_country",
    "find_state",
    "is_united_states",
    "normalize_country_name",
    "resolve_country_feature_name",
]
