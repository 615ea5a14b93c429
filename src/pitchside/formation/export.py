"""CSV export helpers for generated lineups."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from pitchside.config import Formation
from pitchside.models import POSITIONS

from .assigner import FormationPlayer


class FormationExportError(RuntimeError):
    """Raised when a lineup does not fit the formation it is exported for."""


_HEADERS = ("slot", "position", "jersey_number", "name", "player_id")


def _order_by_slot(players: Sequence[FormationPlayer]) -> list[FormationPlayer]:
    rank = {kind: idx for idx, kind in enumerate(POSITIONS)}
    return sorted(players, key=lambda player: (rank.get(player.assigned_position, len(rank)), player.jersey_number))


def export_formation_to_csv(formation: Formation, players: Sequence[FormationPlayer]) -> str:
    """Render a lineup as CSV, goalkeeper first, one row per slot."""

    for kind in POSITIONS:
        assigned = sum(1 for player in players if player.assigned_position == kind)
        if assigned > formation.positions[kind]:
            raise FormationExportError(
                f"Lineup has {assigned} {kind}(s) but {formation.name} only allows {formation.positions[kind]}"
            )

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(_HEADERS)
    for slot, player in enumerate(_order_by_slot(players), start=1):
        writer.writerow([slot, player.assigned_position, player.jersey_number, player.name, player.player_id])
    return buffer.getvalue()


__all__ = [
    "FormationExportError",
    "export_formation_to_csv",
]
