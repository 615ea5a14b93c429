"""Helpers to load roster CSVs and emit canonical player records."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from pydantic import BaseModel, ValidationError

from pitchside.models import PlayerRecord, encode_position_history


logger = logging.getLogger(__name__)

DEFAULT_ROSTER_MAPPING = {
    "player_id": "id",
    "name": "name",
    "position": "position",
    "jersey_number": "jersey_number",
    "checked_in": "checked_in",
    "goals": "goals",
    "assists": "assists",
    "red_cards": "red_cards",
    "yellow_cards": "yellow_cards",
    "matches_played": "matches_played",
    "position_history": "position_history",
}

_POSITION_ALIASES = {
    "gk": "goalkeeper",
    "goalie": "goalkeeper",
    "df": "defender",
    "def": "defender",
    "mf": "midfielder",
    "mid": "midfielder",
    "fw": "forward",
    "fwd": "forward",
    "st": "forward",
}

_TRUTHY = {"1", "true", "yes", "y", "x", "in"}


class RosterRow(BaseModel):
    raw_id: Optional[str] = None
    raw_name: str
    raw_position: str
    raw_jersey_number: str
    raw_checked_in: Optional[str] = None
    raw_goals: Optional[str] = None
    raw_assists: Optional[str] = None
    raw_red_cards: Optional[str] = None
    raw_yellow_cards: Optional[str] = None
    raw_matches_played: Optional[str] = None
    raw_position_history: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "RosterRow":
        def extract(key: str, *, default: Optional[str] = None) -> Optional[str]:
            column = mapping.get(key)
            if column is None:
                return default
            value = row.get(column)
            if value is None:
                return default
            value = value.strip()
            return value if value else default

        return cls(
            raw_id=extract("player_id"),
            raw_name=extract("name", default="") or "",
            raw_position=extract("position", default="") or "",
            raw_jersey_number=extract("jersey_number", default="") or "",
            raw_checked_in=extract("checked_in"),
            raw_goals=extract("goals"),
            raw_assists=extract("assists"),
            raw_red_cards=extract("red_cards"),
            raw_yellow_cards=extract("yellow_cards"),
            raw_matches_played=extract("matches_played"),
            raw_position_history=extract("position_history"),
        )


def normalize_position(raw: str) -> str:
    key = raw.strip().lower()
    return _POSITION_ALIASES.get(key, key)


def _int_or_zero(raw: Optional[str]) -> int:
    return int(raw) if raw else 0


def rows_to_players(rows: Iterable[RosterRow]) -> List[PlayerRecord]:
    """Convert roster rows into player records, raising ValueError on bad rows."""

    players: List[PlayerRecord] = []
    for index, row in enumerate(rows, start=1):
        try:
            position = normalize_position(row.raw_position)
            history: list[str] = []
            if row.raw_position_history:
                history = [normalize_position(part) for part in row.raw_position_history.split("|") if part.strip()]
            players.append(
                PlayerRecord(
                    player_id=int(row.raw_id) if row.raw_id else index,
                    name=row.raw_name,
                    position=position,  # type: ignore[arg-type]
                    jersey_number=int(row.raw_jersey_number),
                    is_checked_in=(row.raw_checked_in or "").lower() in _TRUTHY,
                    goals=_int_or_zero(row.raw_goals),
                    assists=_int_or_zero(row.raw_assists),
                    red_cards=_int_or_zero(row.raw_red_cards),
                    yellow_cards=_int_or_zero(row.raw_yellow_cards),
                    matches_played=_int_or_zero(row.raw_matches_played),
                    position_history=encode_position_history(history or [position]),  # type: ignore[arg-type]
                )
            )
        except (ValidationError, ValueError) as exc:
            raise ValueError(f"Roster row {index} ({row.raw_name or 'unnamed'}) is invalid: {exc}") from exc

    seen_ids: dict[int, int] = {}
    seen_jerseys: dict[int, str] = {}
    for index, player in enumerate(players, start=1):
        if player.player_id in seen_ids:
            raise ValueError(
                f"Player id {player.player_id} is used by roster rows {seen_ids[player.player_id]} and {index}"
            )
        seen_ids[player.player_id] = index
        if player.jersey_number in seen_jerseys:
            raise ValueError(
                f"Jersey number {player.jersey_number} is shared by {seen_jerseys[player.jersey_number]} and {player.name}"
            )
        seen_jerseys[player.jersey_number] = player.name
    return players


def load_roster_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[PlayerRecord]:
    resolved = {**DEFAULT_ROSTER_MAPPING, **(mapping or {})}
    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        rows = [RosterRow.from_mapping(row, resolved) for row in reader]
    players = rows_to_players(rows)
    logger.info("Loaded %s players from %s", len(players), path)
    return players
