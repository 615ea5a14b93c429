from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pitchside.models import Position, PreferredFoot


class PlayerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    position: Position
    jersey_number: int = Field(..., ge=1, le=99)
    phone: Optional[str] = None
    preferred_foot: PreferredFoot = "right"
    is_checked_in: bool = False
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    red_cards: int = Field(default=0, ge=0)
    yellow_cards: int = Field(default=0, ge=0)
    matches_played: int = Field(default=0, ge=0)


class PlayerUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    position: Optional[Position] = None
    jersey_number: Optional[int] = Field(default=None, ge=1, le=99)
    phone: Optional[str] = None
    preferred_foot: Optional[PreferredFoot] = None
    is_checked_in: Optional[bool] = None
    goals: Optional[int] = Field(default=None, ge=0)
    assists: Optional[int] = Field(default=None, ge=0)
    red_cards: Optional[int] = Field(default=None, ge=0)
    yellow_cards: Optional[int] = Field(default=None, ge=0)
    matches_played: Optional[int] = Field(default=None, ge=0)


class PlayerResponse(BaseModel):
    player_id: int
    name: str
    position: Position
    jersey_number: int
    phone: Optional[str]
    preferred_foot: PreferredFoot
    is_checked_in: bool
    goals: int
    assists: int
    red_cards: int
    yellow_cards: int
    matches_played: int
    position_history: List[Position]
    created_at: datetime


class SmartPositionResponse(BaseModel):
    player_id: int
    suggested_position: Position
    performance_score: float


class WeekCountersResponse(BaseModel):
    goals: int = 0
    assists: int = 0
    matches: int = 0


class WeeklySummaryResponse(BaseModel):
    player: str
    this_week: WeekCountersResponse
    last_week: WeekCountersResponse
    improvement: WeekCountersResponse
    summary: str


class RosterStatsResponse(BaseModel):
    total_players: int
    checked_in_players: int
    attendance_rate: int
    position_counts: Dict[str, int]


class NaturalStatsRequest(BaseModel):
    text: str = Field(..., min_length=1)


class NaturalStatsResponse(BaseModel):
    message: str
    player: PlayerResponse
    parsed_stats: Dict[str, int]
