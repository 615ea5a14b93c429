from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from pitchside.models import Position


class FormationPositions(BaseModel):
    goalkeeper: int = Field(default=0, ge=0)
    defender: int = Field(default=0, ge=0)
    midfielder: int = Field(default=0, ge=0)
    forward: int = Field(default=0, ge=0)


class FormationPayload(BaseModel):
    name: str = Field(..., min_length=1)
    positions: FormationPositions
    description: str = ""


class FormationResponse(FormationPayload):
    total: int


class FormationRequest(BaseModel):
    formation_name: Optional[str] = None
    formation: Optional[FormationPayload] = None

    @model_validator(mode="after")
    def _one_formation(self) -> "FormationRequest":
        if (self.formation_name is None) == (self.formation is None):
            raise ValueError("Provide exactly one of formation_name or formation")
        return self


class FormationPlayerResponse(BaseModel):
    player_id: int
    name: str
    jersey_number: int
    assigned_position: Position


class FormationLineupResponse(BaseModel):
    formation: FormationResponse
    players: List[FormationPlayerResponse]
    message: str
