"""Population time-series indexing."""

from .lookup import PopulationLookup, round_half_up, target_year

__all__ = ["PopulationLookup", "round_half_up", "target_year"]
