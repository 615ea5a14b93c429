"""Tiered heuristic for suggesting a player's best position.

Rules run top-down and the first one that returns a position wins:

1. performance   - prolific scorers go forward, prolific creators to midfield
2. experience    - per-match rates for players with more than five matches
3. team_needs    - a position the roster is short of by more than one player
4. history       - the position the player has occupied most often
5. experience_fallback - the experience checks once more
6. default       - the player's registered position
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from pitchside.models import MalformedHistory, PlayerRecord, Position, decode_position_history

from .needs import analyze_team_needs, most_needed_position


logger = logging.getLogger("uvicorn.error")

_PERFORMANCE_GOALS = 3
_PERFORMANCE_ASSISTS = 3
_EXPERIENCED_MATCHES = 5
_GOALS_PER_MATCH = 0.5
_ASSISTS_PER_MATCH = 0.3
_TEAM_NEED_THRESHOLD = 1

RuleFn = Callable[[PlayerRecord, Sequence[PlayerRecord]], Optional[Position]]


@dataclass(frozen=True)
class PositionRule:
    name: str
    evaluate: RuleFn

    def __call__(self, player: PlayerRecord, roster: Sequence[PlayerRecord]) -> Optional[Position]:
        return self.evaluate(player, roster)


def performance_rule(player: PlayerRecord, roster: Sequence[PlayerRecord]) -> Optional[Position]:
    if player.goals >= _PERFORMANCE_GOALS:
        return "forward"
    if player.assists >= _PERFORMANCE_ASSISTS:
        return "midfielder"
    return None


def experience_rule(player: PlayerRecord, roster: Sequence[PlayerRecord]) -> Optional[Position]:
    if player.matches_played <= _EXPERIENCED_MATCHES:
        return None
    goals_per_match = player.goals / player.matches_played
    assists_per_match = player.assists / player.matches_played
    if goals_per_match > _GOALS_PER_MATCH:
        return "forward"
    if assists_per_match > _ASSISTS_PER_MATCH:
        return "midfielder"
    if player.red_cards + player.yellow_cards == 0:
        return "defender"
    return None


def team_needs_rule(player: PlayerRecord, roster: Sequence[PlayerRecord]) -> Optional[Position]:
    needs = analyze_team_needs(roster)
    kind = most_needed_position(needs)
    if needs[kind] > _TEAM_NEED_THRESHOLD:
        return kind  # type: ignore[return-value]
    return None


def history_rule(player: PlayerRecord, roster: Sequence[PlayerRecord]) -> Optional[Position]:
    try:
        history = decode_position_history(player.position_history)
    except MalformedHistory as exc:
        logger.warning("Ignoring position history for player %s: %s", player.player_id, exc)
        return None
    if len(history) <= 1:
        return None
    top = max(Counter(history.positions).values())
    running: Counter[str] = Counter()
    # Ties go to the kind whose count reaches the maximum first.
    for position in history.positions:
        running[position] += 1
        if running[position] == top:
            return position
    return None


# Mirrors the experience tier after team-needs and history; kept as observed.
experience_fallback_rule = experience_rule


def default_rule(player: PlayerRecord, roster: Sequence[PlayerRecord]) -> Optional[Position]:
    return player.position


DEFAULT_RULES: Tuple[PositionRule, ...] = (
    PositionRule("performance", performance_rule),
    PositionRule("experience", experience_rule),
    PositionRule("team_needs", team_needs_rule),
    PositionRule("history", history_rule),
    PositionRule("experience_fallback", experience_fallback_rule),
    PositionRule("default", default_rule),
)


def suggest_position(
    player: PlayerRecord,
    roster: Sequence[PlayerRecord],
    *,
    rules: Sequence[PositionRule] = DEFAULT_RULES,
) -> Position:
    """Return the suggested position for ``player`` given the full ``roster``."""

    for rule in rules:
        suggestion = rule(player, roster)
        if suggestion is not None:
            logger.debug("Rule %s suggested %s for player %s", rule.name, suggestion, player.player_id)
            return suggestion
    return player.position
