"""Formation catalog for team generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping

from pitchside.models import POSITIONS


@dataclass(frozen=True)
class Formation:
    name: str
    positions: Mapping[str, int]
    description: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        unknown = set(self.positions) - set(POSITIONS)
        if unknown:
            raise ValueError(f"Unknown position kinds in formation {self.name!r}: {sorted(unknown)}")
        counts: Dict[str, int] = {}
        for kind in POSITIONS:
            count = self.positions.get(kind, 0)
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise ValueError(f"Formation {self.name!r} needs a non-negative count for {kind}, got {count!r}")
            counts[kind] = count
        object.__setattr__(self, "positions", MappingProxyType(counts))

    @property
    def total(self) -> int:
        return sum(self.positions.values())

    def counts(self) -> tuple[int, ...]:
        return tuple(self.positions[kind] for kind in POSITIONS)


def _formation(name: str, goalkeeper: int, defender: int, midfielder: int, forward: int, description: str) -> Formation:
    return Formation(
        name=name,
        positions={
            "goalkeeper": goalkeeper,
            "defender": defender,
            "midfielder": midfielder,
            "forward": forward,
        },
        description=description,
    )


_FORMATIONS: Dict[str, Formation] = {
    formation.name: formation
    for formation in (
        _formation("4-4-2", 1, 4, 4, 2, "Classic balanced formation with solid defense and midfield"),
        _formation("4-3-3", 1, 4, 3, 3, "Attack-minded formation with strong wing play"),
        _formation("3-5-2", 1, 3, 5, 2, "Midfield-heavy formation for possession-based play"),
        _formation("4-2-3-1", 1, 4, 5, 1, "Modern formation with defensive midfield and attacking midfielder"),
    )
}


def iter_formations() -> Iterable[Formation]:
    """Return an iterator over the built-in formations in catalog order."""

    return _FORMATIONS.values()


def get_formation(name: str, extra: Mapping[str, Formation] | None = None) -> Formation:
    """Fetch a formation by name, raising KeyError if missing.

    ``extra`` lets callers layer custom formations over the built-in catalog.
    """

    key = name.strip()
    if extra and key in extra:
        return extra[key]
    if key not in _FORMATIONS:
        raise KeyError(f"No formation configured with name {name!r}")
    return _FORMATIONS[key]
