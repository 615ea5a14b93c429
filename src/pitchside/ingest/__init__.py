"""Input adapters that normalize raw roster data."""

from .roster import RosterRow, load_roster_csv, normalize_position, rows_to_players

__all__ = [
    "RosterRow",
    "load_roster_csv",
    "normalize_position",
    "rows_to_players",
]
