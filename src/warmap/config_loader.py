"""Persist and load column profiles (extra header names per logical field)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass
class ColumnProfile:
    players: Dict[str, List[str]] = field(default_factory=dict)
    population: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "ColumnProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            players=_as_candidates(data.get("players", {})),
            population=_as_candidates(data.get("population", {})),
        )

    def save(self, path: Path) -> None:
        payload = {
            "players": self.players,
            "population": self.population,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _as_candidates(raw: Dict[str, object]) -> Dict[str, List[str]]:
    # Accept "a|b" strings as well as lists, like the CLI's column flags.
    result: Dict[str, List[str]] = {}
    for key, value in raw.items():
        if isinstance(value, str):
            result[key] = [part.strip() for part in value.split("|") if part.strip()]
        else:
            result[key] = [str(part).strip() for part in value if str(part).strip()]  # type: ignore[union-attr]
    return result
