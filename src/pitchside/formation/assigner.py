"""Randomized starting-lineup assignment for a target formation."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, MutableSequence, Protocol, Sequence, TypeVar

from pitchside.config import Formation
from pitchside.models import POSITIONS, PlayerRecord


logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with ``randrange(n)`` returning an int in ``[0, n)``."""

    def randrange(self, stop: int) -> int: ...


@dataclass(frozen=True)
class FormationPlayer:
    player_id: int
    name: str
    jersey_number: int
    assigned_position: str


@dataclass(frozen=True)
class AssignmentError:
    @property
    def code(self) -> str:
        raise NotImplementedError

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class NoPlayersAvailable(AssignmentError):
    @property
    def code(self) -> str:
        return "no_players_available"

    @property
    def message(self) -> str:
        return "No checked-in players available for team formation"


@dataclass(frozen=True)
class InsufficientPlayers(AssignmentError):
    formation_name: str
    required: int
    available: int

    @property
    def code(self) -> str:
        return "insufficient_players"

    @property
    def message(self) -> str:
        return (
            f"Need {self.required} players for {self.formation_name} formation, "
            f"but only {self.available} are checked in"
        )


def _take_random(pool: MutableSequence[T], rng: RandomSource) -> T:
    return pool.pop(rng.randrange(len(pool)))


def _to_formation_player(player: PlayerRecord, position: str) -> FormationPlayer:
    return FormationPlayer(
        player_id=player.player_id,
        name=player.name,
        jersey_number=player.jersey_number,
        assigned_position=position,
    )


def assign_formation(
    checked_in_players: Sequence[PlayerRecord],
    formation: Formation,
    *,
    rng: RandomSource | None = None,
) -> List[FormationPlayer] | AssignmentError:
    """Compose a lineup for ``formation`` from ``checked_in_players``.

    Slots are filled first from players registered at that position, then any
    remaining slots are filled from the leftover pool regardless of position.
    Returns an :class:`AssignmentError` value instead of raising.
    """

    if not checked_in_players:
        return NoPlayersAvailable()

    required = formation.total
    available = len(checked_in_players)
    if available < required:
        return InsufficientPlayers(formation_name=formation.name, required=required, available=available)

    rng = rng or random.Random()

    buckets: Dict[str, List[PlayerRecord]] = {kind: [] for kind in POSITIONS}
    for player in checked_in_players:
        buckets[player.position].append(player)

    selected: List[FormationPlayer] = []
    assigned_ids: set[int] = set()
    filled: Dict[str, int] = {kind: 0 for kind in POSITIONS}

    for kind in POSITIONS:
        bucket = buckets[kind]
        while filled[kind] < formation.positions[kind] and bucket:
            player = _take_random(bucket, rng)
            selected.append(_to_formation_player(player, kind))
            assigned_ids.add(player.player_id)
            filled[kind] += 1

    if len(selected) < required:
        open_slots = [
            kind
            for kind in POSITIONS
            for _ in range(formation.positions[kind] - filled[kind])
        ]
        pool = [player for player in checked_in_players if player.player_id not in assigned_ids]
        for kind in open_slots:
            if not pool:
                logger.warning(
                    "Formation %s ran out of players with %d slot(s) unfilled",
                    formation.name,
                    required - len(selected),
                )
                break
            player = _take_random(pool, rng)
            selected.append(_to_formation_player(player, kind))
            assigned_ids.add(player.player_id)

    return selected
