"""Player data model and blob decoders."""

from .history import (
    MalformedHistory,
    PositionHistory,
    WeekCounters,
    WeeklyStats,
    decode_position_history,
    decode_weekly_stats,
    encode_position_history,
    encode_weekly_stats,
)
from .player import POSITIONS, PlayerRecord, Position, PreferredFoot

__all__ = [
    "POSITIONS",
    "PlayerRecord",
    "Position",
    "PreferredFoot",
    "MalformedHistory",
    "PositionHistory",
    "WeekCounters",
    "WeeklyStats",
    "decode_position_history",
    "decode_weekly_stats",
    "encode_position_history",
    "encode_weekly_stats",
]
