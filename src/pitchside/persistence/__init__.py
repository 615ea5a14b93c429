"""Persistence layer for players, match reminders and name suggestions."""

from __future__ import annotations

import logging
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Mapping, Optional

from pitchside.models import (
    MalformedHistory,
    PlayerRecord,
    PositionHistory,
    WeeklyStats,
    decode_position_history,
    decode_weekly_stats,
    encode_position_history,
    encode_weekly_stats,
)


logger = logging.getLogger("uvicorn.error")

_STAT_FIELDS = ("goals", "assists", "red_cards", "yellow_cards")
_UPDATABLE_FIELDS = {
    "name",
    "position",
    "jersey_number",
    "phone",
    "preferred_foot",
    "is_checked_in",
    "goals",
    "assists",
    "red_cards",
    "yellow_cards",
    "matches_played",
}


class JerseyNumberTaken(ValueError):
    """Raised when a jersey number is already assigned to another player."""

    def __init__(self, jersey_number: int):
        super().__init__(f"Jersey number {jersey_number} is already taken")
        self.jersey_number = jersey_number


@dataclass
class ReminderRecord:
    reminder_id: int
    player_id: Optional[int]
    match_time: datetime
    is_active: bool
    created_at: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class PlayerStore:
    """Simple SQLite-backed store for the club roster."""

    def __init__(self, db_path: Path | str):
        self._use_uri = isinstance(db_path, str) and db_path.startswith("file:")
        self.db_path: Path | str = db_path if self._use_uri else Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "pitchside-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "pitchside.sqlite"
            logger.warning("Could not open %s; falling back to %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                position TEXT NOT NULL,
                jersey_number INTEGER NOT NULL UNIQUE,
                phone TEXT,
                is_checked_in INTEGER NOT NULL DEFAULT 0,
                preferred_foot TEXT DEFAULT 'right',
                position_history TEXT DEFAULT '[]',
                goals INTEGER NOT NULL DEFAULT 0,
                assists INTEGER NOT NULL DEFAULT 0,
                red_cards INTEGER NOT NULL DEFAULT 0,
                yellow_cards INTEGER NOT NULL DEFAULT 0,
                matches_played INTEGER NOT NULL DEFAULT 0,
                weekly_stats TEXT DEFAULT '{}',
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS match_reminders (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                player_id INTEGER REFERENCES players(id),
                match_time TEXT NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS player_suggestions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                frequency INTEGER NOT NULL DEFAULT 1,
                last_used TEXT NOT NULL
            )
            """
        )
        conn.commit()

    # -- players -------------------------------------------------------------

    def get_player(self, player_id: int) -> Optional[PlayerRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        return self._row_to_player(row) if row is not None else None

    def get_player_by_jersey_number(self, jersey_number: int) -> Optional[PlayerRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE jersey_number = ?", (jersey_number,)).fetchone()
        return self._row_to_player(row) if row is not None else None

    def list_players(self, *, checked_in: bool | None = None) -> List[PlayerRecord]:
        query = "SELECT * FROM players"
        params: tuple[Any, ...] = ()
        if checked_in is not None:
            query += " WHERE is_checked_in = ?"
            params = (int(checked_in),)
        query += " ORDER BY jersey_number"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_player(row) for row in rows]

    def create_player(
        self,
        *,
        name: str,
        position: str,
        jersey_number: int,
        phone: Optional[str] = None,
        preferred_foot: str = "right",
        is_checked_in: bool = False,
        goals: int = 0,
        assists: int = 0,
        red_cards: int = 0,
        yellow_cards: int = 0,
        matches_played: int = 0,
    ) -> PlayerRecord:
        if self.get_player_by_jersey_number(jersey_number) is not None:
            raise JerseyNumberTaken(jersey_number)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO players (
                        name, position, jersey_number, phone, is_checked_in, preferred_foot,
                        position_history, goals, assists, red_cards, yellow_cards,
                        matches_played, weekly_stats, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        name,
                        position,
                        jersey_number,
                        phone or None,
                        int(is_checked_in),
                        preferred_foot or "right",
                        encode_position_history([position]),  # type: ignore[list-item]
                        goals,
                        assists,
                        red_cards,
                        yellow_cards,
                        matches_played,
                        encode_weekly_stats(WeeklyStats()),
                        _now().isoformat(),
                    ),
                )
                conn.commit()
                player_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            raise JerseyNumberTaken(jersey_number) from exc

        self.bump_player_suggestion(name)
        player = self.get_player(int(player_id))  # type: ignore[arg-type]
        if player is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after insert")
        return player

    def update_player(self, player_id: int, updates: Mapping[str, Any]) -> Optional[PlayerRecord]:
        player = self.get_player(player_id)
        if player is None:
            return None

        unknown = set(updates) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        values = dict(updates)
        jersey = values.get("jersey_number")
        if jersey is not None:
            existing = self.get_player_by_jersey_number(jersey)
            if existing is not None and existing.player_id != player_id:
                raise JerseyNumberTaken(jersey)

        new_position = values.get("position")
        if new_position is not None and new_position != player.position:
            values["position_history"] = encode_position_history(
                self._history_or_empty(player).append(new_position)
            )
        if "is_checked_in" in values:
            values["is_checked_in"] = int(bool(values["is_checked_in"]))
        if not values:
            return player

        assignments = ", ".join(f"{column} = ?" for column in values)
        try:
            with self._connect() as conn:
                conn.execute(
                    f"UPDATE players SET {assignments} WHERE id = ?",
                    (*values.values(), player_id),
                )
                conn.commit()
        except sqlite3.IntegrityError as exc:
            raise JerseyNumberTaken(int(jersey or 0)) from exc
        return self.get_player(player_id)

    def delete_player(self, player_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM players WHERE id = ?", (player_id,))
            conn.commit()
        return cursor.rowcount > 0

    def toggle_check_in(self, player_id: int) -> Optional[PlayerRecord]:
        player = self.get_player(player_id)
        if player is None:
            return None
        return self.update_player(player_id, {"is_checked_in": not player.is_checked_in})

    def add_player_stats(self, player_id: int, increments: Mapping[str, int]) -> Optional[PlayerRecord]:
        """Add stat increments to career totals and to this week's counters."""

        player = self.get_player(player_id)
        if player is None:
            return None

        updates = {
            field: getattr(player, field) + int(increments[field])
            for field in _STAT_FIELDS
            if increments.get(field) is not None
        }
        try:
            weekly = decode_weekly_stats(player.weekly_stats)
        except ValueError as exc:
            logger.warning("Resetting weekly stats for player %s: %s", player_id, exc)
            weekly = WeeklyStats()
        weekly.this_week.goals += int(increments.get("goals") or 0)
        weekly.this_week.assists += int(increments.get("assists") or 0)

        with self._connect() as conn:
            columns = [*updates, "weekly_stats"]
            assignments = ", ".join(f"{column} = ?" for column in columns)
            conn.execute(
                f"UPDATE players SET {assignments} WHERE id = ?",
                (*updates.values(), encode_weekly_stats(weekly), player_id),
            )
            conn.commit()
        return self.get_player(player_id)

    def rollover_weekly_stats(self) -> int:
        """Move this week's counters to last week for every player."""

        rolled = 0
        for player in self.list_players():
            try:
                weekly = decode_weekly_stats(player.weekly_stats)
            except ValueError as exc:
                logger.error("Error updating weekly stats for player %s: %s", player.player_id, exc)
                continue
            rolled_over = WeeklyStats(last_week=weekly.this_week)
            with self._connect() as conn:
                conn.execute(
                    "UPDATE players SET weekly_stats = ? WHERE id = ?",
                    (encode_weekly_stats(rolled_over), player.player_id),
                )
                conn.commit()
            rolled += 1
        logger.info("Rolled weekly stats for %s player(s)", rolled)
        return rolled

    def _history_or_empty(self, player: PlayerRecord) -> PositionHistory:
        try:
            return decode_position_history(player.position_history)
        except MalformedHistory as exc:
            logger.warning("Restarting position history for player %s: %s", player.player_id, exc)
            return PositionHistory()

    # -- reminders -----------------------------------------------------------

    def create_reminder(
        self,
        *,
        match_time: datetime,
        player_id: Optional[int] = None,
        is_active: bool = True,
    ) -> ReminderRecord:
        if match_time.tzinfo is None:
            match_time = match_time.replace(tzinfo=timezone.utc)
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO match_reminders (player_id, match_time, is_active, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (player_id, match_time.isoformat(), int(is_active), _now().isoformat()),
            )
            conn.commit()
            reminder_id = cursor.lastrowid
        reminder = self.get_reminder(int(reminder_id))  # type: ignore[arg-type]
        if reminder is None:  # pragma: no cover
            raise KeyError(f"Reminder {reminder_id} not found after insert")
        return reminder

    def get_reminder(self, reminder_id: int) -> Optional[ReminderRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM match_reminders WHERE id = ?", (reminder_id,)).fetchone()
        return self._row_to_reminder(row) if row is not None else None

    def list_active_reminders(self) -> List[ReminderRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM match_reminders WHERE is_active = 1 ORDER BY match_time"
            ).fetchall()
        return [self._row_to_reminder(row) for row in rows]

    def deactivate_reminder(self, reminder_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("UPDATE match_reminders SET is_active = 0 WHERE id = ?", (reminder_id,))
            conn.commit()
        return cursor.rowcount > 0

    # -- name suggestions ----------------------------------------------------

    def player_suggestions(self, query: str, limit: int = 5) -> List[str]:
        if not query or len(query) < 2:
            return []
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT name FROM player_suggestions
                WHERE name LIKE ?
                ORDER BY frequency DESC, datetime(last_used) DESC
                LIMIT ?
                """,
                (f"%{query}%", limit),
            ).fetchall()
        return [row["name"] for row in rows]

    def bump_player_suggestion(self, name: str) -> None:
        now = _now().isoformat()
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, frequency FROM player_suggestions WHERE name = ? LIMIT 1", (name,)
            ).fetchone()
            if row is not None:
                conn.execute(
                    "UPDATE player_suggestions SET frequency = ?, last_used = ? WHERE id = ?",
                    (row["frequency"] + 1, now, row["id"]),
                )
            else:
                conn.execute(
                    "INSERT INTO player_suggestions (name, frequency, last_used) VALUES (?, 1, ?)",
                    (name, now),
                )
            conn.commit()

    # -- row mapping ---------------------------------------------------------

    def _row_to_player(self, row: sqlite3.Row) -> PlayerRecord:
        return PlayerRecord(
            player_id=row["id"],
            name=row["name"],
            position=row["position"],
            jersey_number=row["jersey_number"],
            phone=row["phone"],
            preferred_foot=row["preferred_foot"] or "right",
            is_checked_in=bool(row["is_checked_in"]),
            goals=row["goals"],
            assists=row["assists"],
            red_cards=row["red_cards"],
            yellow_cards=row["yellow_cards"],
            matches_played=row["matches_played"],
            position_history=row["position_history"] or "[]",
            weekly_stats=row["weekly_stats"] or "{}",
            created_at=_parse_ts(row["created_at"]),
        )

    def _row_to_reminder(self, row: sqlite3.Row) -> ReminderRecord:
        return ReminderRecord(
            reminder_id=row["id"],
            player_id=row["player_id"],
            match_time=_parse_ts(row["match_time"]),
            is_active=bool(row["is_active"]),
            created_at=_parse_ts(row["created_at"]),
        )


__all__ = [
    "JerseyNumberTaken",
    "PlayerStore",
    "ReminderRecord",
]
