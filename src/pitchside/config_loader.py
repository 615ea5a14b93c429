"""Persist and load custom formation profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from pitchside.config import Formation


@dataclass
class FormationProfile:
    formations: Dict[str, Formation] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "FormationProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("formations", [])
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of formations")
        formations: Dict[str, Formation] = {}
        for entry in data:
            if not isinstance(entry, dict) or "name" not in entry or "positions" not in entry:
                raise ValueError(f"{path}: each formation needs 'name' and 'positions'")
            formation = Formation(
                name=str(entry["name"]),
                positions=dict(entry["positions"]),
                description=str(entry.get("description", "")),
            )
            formations[formation.name] = formation
        return cls(formations=formations)

    def save(self, path: Path) -> None:
        payload = {
            "formations": [
                {
                    "name": formation.name,
                    "positions": dict(formation.positions),
                    "description": formation.description,
                }
                for formation in self.formations.values()
            ]
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_formations(path: Path) -> Dict[str, Formation]:
    return FormationProfile.load(path).formations
