"""Heuristics layered on persisted player records."""

from .needs import IDEAL_RATIOS, analyze_team_needs, most_needed_position, performance_score
from .position import DEFAULT_RULES, PositionRule, suggest_position
from .stats_text import ParsedStats, StatIncrements, match_player_name, parse_stats_text

__all__ = [
    "DEFAULT_RULES",
    "IDEAL_RATIOS",
    "ParsedStats",
    "PositionRule",
    "StatIncrements",
    "analyze_team_needs",
    "match_player_name",
    "most_needed_position",
    "parse_stats_text",
    "performance_score",
    "suggest_position",
]
