"""Parse free-text match notes like "Sam scored 2 goals" into stat increments."""

from __future__ import annotations

import re
from typing import Dict, Optional, Sequence

from pydantic import BaseModel, Field

from pitchside.models import PlayerRecord


_NAME_PATTERN = re.compile(r"\b([A-Z][a-z]+)\b")

_GOAL_PATTERNS = (
    re.compile(r"(\d+)\s*goals?"),
    re.compile(r"scored\s*(\d+)"),
    re.compile(r"(\d+)\s*times?"),
)

_ASSIST_PATTERNS = (
    re.compile(r"(\d+)\s*assists?"),
    re.compile(r"assisted\s*(\d+)"),
)


class StatIncrements(BaseModel):
    goals: Optional[int] = Field(default=None, ge=0)
    assists: Optional[int] = Field(default=None, ge=0)
    red_cards: Optional[int] = Field(default=None, ge=0)
    yellow_cards: Optional[int] = Field(default=None, ge=0)

    def as_dict(self) -> Dict[str, int]:
        return self.model_dump(exclude_none=True)


class ParsedStats(BaseModel):
    player_name: str
    stats: StatIncrements


def _first_count(patterns: Sequence[re.Pattern[str]], text: str) -> Optional[int]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def parse_stats_text(text: str) -> ParsedStats | None:
    """Extract a player name and stat increments, or ``None`` if nothing parsed."""

    name_match = _NAME_PATTERN.search(text)
    if not name_match:
        return None

    lower = text.lower()
    goals = _first_count(_GOAL_PATTERNS, lower)
    assists = _first_count(_ASSIST_PATTERNS, lower)
    red_cards = 1 if "red card" in lower else None
    yellow_cards = 1 if "yellow card" in lower else None

    if goals is None and "scored" in lower:
        goals = 1
    if assists is None and "assist" in lower:
        assists = 1

    stats = StatIncrements(goals=goals, assists=assists, red_cards=red_cards, yellow_cards=yellow_cards)
    if not stats.as_dict():
        return None
    return ParsedStats(player_name=name_match.group(1), stats=stats)


def match_player_name(name: str, players: Sequence[PlayerRecord]) -> PlayerRecord | None:
    """Find the first player whose name contains ``name`` or is contained by it."""

    needle = name.lower()
    for player in players:
        candidate = player.name.lower()
        if needle in candidate or candidate in needle:
            return player
    return None
