"""Row-level validation counters reported alongside parsed datasets."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class PlayerValidation:
    row_count: int = 0
    accepted: int = 0
    rejected: int = 0
    missing_state: int = 0


@dataclass(frozen=True)
class PopulationValidation:
    row_count: int = 0
    accepted: int = 0
    rejected: int = 0


@dataclass(frozen=True)
class InternationalValidation:
    row_count: int = 0
    accepted: int = 0
    rejected: int = 0


@dataclass(frozen=True)
class DataValidationSummary:
    """Latest player and population counters; either side may be empty."""

    players: PlayerValidation = field(default_factory=PlayerValidation)
    populations: PopulationValidation = field(default_factory=PopulationValidation)
    international: InternationalValidation = field(default_factory=InternationalValidation)

    def to_dict(self) -> dict[str, dict[str, int]]:
        return asdict(self)
