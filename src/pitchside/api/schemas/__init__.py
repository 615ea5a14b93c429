"""Pydantic models for API I/O."""

from .formation import (
    FormationLineupResponse,
    FormationPayload,
    FormationPlayerResponse,
    FormationPositions,
    FormationRequest,
    FormationResponse,
)
from .player import (
    NaturalStatsRequest,
    NaturalStatsResponse,
    PlayerCreateRequest,
    PlayerResponse,
    PlayerUpdateRequest,
    RosterStatsResponse,
    SmartPositionResponse,
    WeekCountersResponse,
    WeeklySummaryResponse,
)
from .reminder import ReminderRequest, ReminderResponse

__all__ = [
    "FormationLineupResponse",
    "FormationPayload",
    "FormationPlayerResponse",
    "FormationPositions",
    "FormationRequest",
    "FormationResponse",
    "NaturalStatsRequest",
    "NaturalStatsResponse",
    "PlayerCreateRequest",
    "PlayerResponse",
    "PlayerUpdateRequest",
    "ReminderRequest",
    "ReminderResponse",
    "RosterStatsResponse",
    "SmartPositionResponse",
    "WeekCountersResponse",
    "WeeklySummaryResponse",
]
