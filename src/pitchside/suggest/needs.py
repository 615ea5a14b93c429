"""Roster composition and per-player performance metrics."""

from __future__ import annotations

import math
from collections import Counter
from typing import Dict, Mapping, Sequence

from pitchside.models import POSITIONS, PlayerRecord


# Ideal share of the roster per position, 4-4-2 as the baseline.
IDEAL_RATIOS: Mapping[str, float] = {
    "goalkeeper": 0.1,
    "defender": 0.4,
    "midfielder": 0.4,
    "forward": 0.2,
}

_GOALS_WEIGHT = 3
_ASSISTS_WEIGHT = 2
_DISCIPLINE_WEIGHT = -1


def analyze_team_needs(roster: Sequence[PlayerRecord]) -> Dict[str, int]:
    """Return how many players each position is short of its ideal share."""

    current = Counter(player.position for player in roster)
    total = len(roster)
    needs: Dict[str, int] = {}
    for kind in POSITIONS:
        ideal = math.ceil(total * IDEAL_RATIOS[kind])
        needs[kind] = max(0, ideal - current.get(kind, 0))
    return needs


def most_needed_position(needs: Mapping[str, int]) -> str:
    # max() keeps the first of equal keys, so ties resolve in POSITIONS order.
    return max(POSITIONS, key=lambda kind: needs.get(kind, 0))


def performance_score(player: PlayerRecord) -> float:
    if player.matches_played == 0:
        return 0.0
    goals_score = player.goals / player.matches_played * _GOALS_WEIGHT
    assists_score = player.assists / player.matches_played * _ASSISTS_WEIGHT
    discipline_score = (player.red_cards * 2 + player.yellow_cards) * _DISCIPLINE_WEIGHT
    return max(0.0, goals_score + assists_score + discipline_score)
