"""Team formation generation from checked-in players."""

from .assigner import (
    AssignmentError,
    FormationPlayer,
    InsufficientPlayers,
    NoPlayersAvailable,
    RandomSource,
    assign_formation,
)
from .export import FormationExportError, export_formation_to_csv

__all__ = [
    "AssignmentError",
    "FormationExportError",
    "FormationPlayer",
    "InsufficientPlayers",
    "NoPlayersAvailable",
    "RandomSource",
    "assign_formation",
    "export_formation_to_csv",
]
