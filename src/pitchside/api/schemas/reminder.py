from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ReminderRequest(BaseModel):
    player_id: Optional[int] = None
    match_time: datetime
    is_active: bool = True


class ReminderResponse(BaseModel):
    reminder_id: int
    player_id: Optional[int]
    match_time: datetime
    is_active: bool
    created_at: datetime
