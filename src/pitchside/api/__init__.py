"""REST API for the pitchside roster service."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Response

from pitchside.api.schemas import (
    FormationLineupResponse,
    FormationPayload,
    FormationPlayerResponse,
    FormationPositions,
    FormationRequest,
    FormationResponse,
    NaturalStatsRequest,
    NaturalStatsResponse,
    PlayerCreateRequest,
    PlayerResponse,
    PlayerUpdateRequest,
    ReminderRequest,
    ReminderResponse,
    RosterStatsResponse,
    SmartPositionResponse,
    WeekCountersResponse,
    WeeklySummaryResponse,
)
from pitchside.config import Formation, get_formation, iter_formations, load_settings
from pitchside.formation import AssignmentError, InsufficientPlayers, assign_formation
from pitchside.models import MalformedHistory, PlayerRecord, decode_position_history, decode_weekly_stats
from pitchside.persistence import JerseyNumberTaken, PlayerStore, ReminderRecord
from pitchside.suggest import match_player_name, parse_stats_text, performance_score, suggest_position


logger = logging.getLogger("uvicorn.error")


def player_to_response(player: PlayerRecord) -> PlayerResponse:
    try:
        history = list(decode_position_history(player.position_history).positions)
    except MalformedHistory as exc:
        logger.warning("Unreadable position history for player %s: %s", player.player_id, exc)
        history = []
    return PlayerResponse(
        player_id=player.player_id,
        name=player.name,
        position=player.position,
        jersey_number=player.jersey_number,
        phone=player.phone,
        preferred_foot=player.preferred_foot,
        is_checked_in=player.is_checked_in,
        goals=player.goals,
        assists=player.assists,
        red_cards=player.red_cards,
        yellow_cards=player.yellow_cards,
        matches_played=player.matches_played,
        position_history=history,
        created_at=player.created_at,
    )


def formation_to_response(formation: Formation) -> FormationResponse:
    return FormationResponse(
        name=formation.name,
        positions=FormationPositions(**formation.positions),
        description=formation.description,
        total=formation.total,
    )


def reminder_to_response(reminder: ReminderRecord) -> ReminderResponse:
    return ReminderResponse(
        reminder_id=reminder.reminder_id,
        player_id=reminder.player_id,
        match_time=reminder.match_time,
        is_active=reminder.is_active,
        created_at=reminder.created_at,
    )


def _assignment_error_detail(error: AssignmentError) -> dict[str, Any]:
    detail: dict[str, Any] = {"error": error.code, "message": error.message}
    if isinstance(error, InsufficientPlayers):
        detail["required"] = error.required
        detail["available"] = error.available
    return detail


def _resolve_formation(request: FormationRequest) -> Formation:
    if request.formation is not None:
        payload: FormationPayload = request.formation
        return Formation(
            name=payload.name,
            positions=payload.positions.model_dump(),
            description=payload.description,
        )
    try:
        return get_formation(request.formation_name or "")
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown formation {request.formation_name!r}") from exc


def _weekly_summary(player: PlayerRecord) -> WeeklySummaryResponse:
    try:
        weekly = decode_weekly_stats(player.weekly_stats)
    except ValueError as exc:
        logger.warning("Weekly stats unavailable for player %s: %s", player.player_id, exc)
        empty = WeekCountersResponse()
        return WeeklySummaryResponse(
            player=player.name,
            this_week=empty,
            last_week=empty,
            improvement=empty,
            summary="No weekly data available yet",
        )
    this_week, last_week = weekly.this_week, weekly.last_week
    return WeeklySummaryResponse(
        player=player.name,
        this_week=WeekCountersResponse(**this_week.model_dump()),
        last_week=WeekCountersResponse(**last_week.model_dump()),
        improvement=WeekCountersResponse(
            goals=this_week.goals - last_week.goals,
            assists=this_week.assists - last_week.assists,
            matches=this_week.matches - last_week.matches,
        ),
        summary=(
            f"This week you scored {this_week.goals} goals and had {this_week.assists} assists "
            f"in {this_week.matches} matches"
        ),
    )


def create_app(db_path: Path | str | None = None) -> FastAPI:
    settings = load_settings()
    app = FastAPI(title="pitchside roster")
    store = PlayerStore(db_path if db_path is not None else settings.db_path)
    app.state.player_store = store
    app.state.settings = settings

    def _fetch_player_or_404(player_id: int) -> PlayerRecord:
        player = store.get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/players", response_model=list[PlayerResponse])
    async def list_players() -> list[PlayerResponse]:
        return [player_to_response(player) for player in store.list_players()]

    @app.get("/players/{player_id}", response_model=PlayerResponse)
    async def get_player(player_id: int) -> PlayerResponse:
        return player_to_response(_fetch_player_or_404(player_id))

    @app.post("/players", response_model=PlayerResponse, status_code=201)
    async def create_player(payload: PlayerCreateRequest) -> PlayerResponse:
        try:
            player = store.create_player(**payload.model_dump())
        except JerseyNumberTaken as exc:
            raise HTTPException(status_code=400, detail="Jersey number is already taken") from exc
        logger.info("Registered player %s (#%s, %s)", player.name, player.jersey_number, player.position)
        return player_to_response(player)

    @app.patch("/players/{player_id}", response_model=PlayerResponse)
    async def update_player(player_id: int, payload: PlayerUpdateRequest) -> PlayerResponse:
        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        try:
            player = store.update_player(player_id, updates)
        except JerseyNumberTaken as exc:
            raise HTTPException(status_code=400, detail="Jersey number is already taken") from exc
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player_to_response(player)

    @app.delete("/players/{player_id}", status_code=204)
    async def delete_player(player_id: int) -> Response:
        if not store.delete_player(player_id):
            raise HTTPException(status_code=404, detail="Player not found")
        return Response(status_code=204)

    @app.post("/players/{player_id}/toggle-checkin", response_model=PlayerResponse)
    async def toggle_checkin(player_id: int) -> PlayerResponse:
        player = store.toggle_check_in(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player_to_response(player)

    @app.get("/players/{player_id}/smart-position", response_model=SmartPositionResponse)
    async def smart_position(player_id: int) -> SmartPositionResponse:
        player = _fetch_player_or_404(player_id)
        roster = store.list_players()
        return SmartPositionResponse(
            player_id=player.player_id,
            suggested_position=suggest_position(player, roster),
            performance_score=round(performance_score(player), 3),
        )

    @app.get("/players/{player_id}/weekly-summary", response_model=WeeklySummaryResponse)
    async def weekly_summary(player_id: int) -> WeeklySummaryResponse:
        return _weekly_summary(_fetch_player_or_404(player_id))

    @app.get("/stats", response_model=RosterStatsResponse)
    async def roster_stats() -> RosterStatsResponse:
        players = store.list_players()
        total = len(players)
        checked_in = sum(1 for player in players if player.is_checked_in)
        return RosterStatsResponse(
            total_players=total,
            checked_in_players=checked_in,
            attendance_rate=round(checked_in / total * 100) if total else 0,
            position_counts=dict(Counter(player.position for player in players)),
        )

    @app.post("/stats/natural", response_model=NaturalStatsResponse)
    async def natural_stats(payload: NaturalStatsRequest) -> NaturalStatsResponse:
        parsed = parse_stats_text(payload.text)
        if parsed is None:
            raise HTTPException(status_code=400, detail="Could not parse stats from text")
        player = match_player_name(parsed.player_name, store.list_players())
        if player is None:
            raise HTTPException(status_code=404, detail=f"Player {parsed.player_name} not found")
        increments = parsed.stats.as_dict()
        updated = store.add_player_stats(player.player_id, increments)
        if updated is None:
            raise HTTPException(status_code=404, detail="Player not found")
        logger.info("Applied %s to %s", increments, updated.name)
        return NaturalStatsResponse(
            message=f"Updated stats for {updated.name}",
            player=player_to_response(updated),
            parsed_stats=increments,
        )

    @app.get("/suggestions", response_model=list[str])
    async def name_suggestions(q: str | None = Query(None)) -> list[str]:
        if not q:
            return []
        return store.player_suggestions(q, limit=settings.suggestion_limit)

    @app.post("/reminders", response_model=ReminderResponse, status_code=201)
    async def create_reminder(payload: ReminderRequest) -> ReminderResponse:
        reminder = store.create_reminder(
            match_time=payload.match_time,
            player_id=payload.player_id,
            is_active=payload.is_active,
        )
        fire_at = reminder.match_time - timedelta(minutes=settings.reminder_lead_minutes)
        if fire_at > datetime.now(timezone.utc):
            logger.info(
                "Reminder %s for player %s scheduled at %s",
                reminder.reminder_id,
                reminder.player_id,
                fire_at.isoformat(),
            )
        else:
            logger.info("Reminder %s is already inside the %s minute lead window", reminder.reminder_id, settings.reminder_lead_minutes)
        return reminder_to_response(reminder)

    @app.get("/reminders", response_model=list[ReminderResponse])
    async def list_reminders() -> list[ReminderResponse]:
        return [reminder_to_response(reminder) for reminder in store.list_active_reminders()]

    @app.post("/reminders/{reminder_id}/deactivate")
    async def deactivate_reminder(reminder_id: int) -> dict[str, Any]:
        if not store.deactivate_reminder(reminder_id):
            raise HTTPException(status_code=404, detail="Reminder not found")
        return {"reminder_id": reminder_id, "is_active": False}

    @app.post("/admin/update-weekly-stats")
    async def update_weekly_stats() -> dict[str, Any]:
        rolled = store.rollover_weekly_stats()
        return {"message": "Weekly stats updated successfully", "players": rolled}

    @app.get("/formations", response_model=list[FormationResponse])
    async def list_formations() -> list[FormationResponse]:
        return [formation_to_response(formation) for formation in iter_formations()]

    @app.post("/formations/generate", response_model=FormationLineupResponse)
    async def generate_formation(payload: FormationRequest) -> FormationLineupResponse:
        try:
            formation = _resolve_formation(payload)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        checked_in = store.list_players(checked_in=True)
        result = assign_formation(checked_in, formation)
        if isinstance(result, AssignmentError):
            logger.info("Formation %s not generated: %s", formation.name, result.message)
            raise HTTPException(status_code=400, detail=_assignment_error_detail(result))
        return FormationLineupResponse(
            formation=formation_to_response(formation),
            players=[
                FormationPlayerResponse(
                    player_id=player.player_id,
                    name=player.name,
                    jersey_number=player.jersey_number,
                    assigned_position=player.assigned_position,  # type: ignore[arg-type]
                )
                for player in result
            ],
            message=f"Successfully generated {formation.name} formation with {len(result)} players",
        )

    return app


__all__ = ["create_app", "player_to_response"]
