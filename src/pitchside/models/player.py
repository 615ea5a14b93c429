"""Canonical player models shared across the store, API and heuristics."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


Position = Literal["goalkeeper", "defender", "midfielder", "forward"]
PreferredFoot = Literal["left", "right", "both"]

# Fixed enumeration order; formation passes and tie-breaks iterate in this order.
POSITIONS: Tuple[Position, ...] = ("goalkeeper", "defender", "midfielder", "forward")


class PlayerRecord(BaseModel):
    """Snapshot of a registered player as read from the store."""

    player_id: int
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
    # Encoded blobs as persisted; see pitchside.models.history.
    position_history: str = "[]"
    weekly_stats: str = "{}"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)

    @property
    def cards(self) -> int:
        return self.red_cards + self.yellow_cards
