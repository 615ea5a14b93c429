"""Versioned encodings for the per-player history and weekly stat blobs."""

from __future__ import annotations

import json
from typing import Any, Iterable, Tuple

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from .player import Position


POSITION_HISTORY_VERSION = 1


class MalformedHistory(ValueError):
    """Raised when a stored position history cannot be decoded."""


class PositionHistory(BaseModel):
    version: int = POSITION_HISTORY_VERSION
    positions: Tuple[Position, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.positions)

    def append(self, position: Position) -> "PositionHistory":
        return PositionHistory(version=self.version, positions=(*self.positions, position))


def decode_position_history(raw: str | None) -> PositionHistory:
    """Decode a stored position log.

    Version 1 is ``{"version": 1, "positions": [...]}``. A bare JSON list is
    the legacy (version 0) layout and is still accepted. Anything else, including
    unknown position names, raises :class:`MalformedHistory`.
    """

    if raw is None or not raw.strip():
        return PositionHistory()
    try:
        payload: Any = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise MalformedHistory(f"position history is not valid JSON: {exc}") from exc

    if isinstance(payload, list):
        payload = {"version": 0, "positions": payload}
    if not isinstance(payload, dict):
        raise MalformedHistory(f"unexpected position history payload type {type(payload).__name__}")

    version = payload.get("version")
    if version not in (0, POSITION_HISTORY_VERSION):
        raise MalformedHistory(f"unsupported position history version {version!r}")
    try:
        return PositionHistory.model_validate(payload)
    except ValidationError as exc:
        raise MalformedHistory(str(exc)) from exc


def encode_position_history(positions: Iterable[Position] | PositionHistory) -> str:
    if isinstance(positions, PositionHistory):
        positions = positions.positions
    return json.dumps({"version": POSITION_HISTORY_VERSION, "positions": list(positions)})


class WeekCounters(BaseModel):
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    matches: int = Field(default=0, ge=0)


class WeeklyStats(BaseModel):
    this_week: WeekCounters = Field(default_factory=WeekCounters)
    last_week: WeekCounters = Field(default_factory=WeekCounters)


def decode_weekly_stats(raw: str | None) -> WeeklyStats:
    """Decode the weekly counters blob, raising ``ValueError`` when unreadable."""

    if raw is None or not raw.strip():
        return WeeklyStats()
    try:
        return WeeklyStats.model_validate_json(raw)
    except ValidationError as exc:
        raise ValueError(f"weekly stats blob is malformed: {exc}") from exc


def encode_weekly_stats(stats: WeeklyStats) -> str:
    return stats.model_dump_json()
