# -*- coding: utf-8 -*-
"""Exercise domain — SQLite storage."""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..dates import Window, local_now, parse_iso, to_iso
from .models import ExerciseCreateRequest, ExerciseDaySummary, ExerciseEntry, ExerciseUpdateRequest

_UPDATABLE = (
    "performed_at",
    "exercise_type",
    "name",
    "duration_min",
    "calories_burned",
    "distance_km",
    "notes",
)


def _db(db_path: Path | None) -> Path:
    return db_path or settings.db_path


def _row_to_exercise(row: sqlite3.Row) -> ExerciseEntry:
    data = dict(row)
    data["performed_at"] = parse_iso(data["performed_at"])
    return ExerciseEntry(**data)


def create_exercise(user_id: str, request: ExerciseCreateRequest, *, db_path: Path | None = None) -> ExerciseEntry:
    exercise_id = str(uuid4())
    with db_conn(_db(db_path)) as conn:
        conn.execute(
            """
            INSERT INTO exercises (
                id, user_id, performed_at, exercise_type, name,
                duration_min, calories_burned, distance_km, notes, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                exercise_id,
                user_id,
                to_iso(request.performed_at or local_now()),
                request.exercise_type,
                request.name,
                float(request.duration_min),
                int(request.calories_burned),
                request.distance_km,
                request.notes,
                to_iso(local_now()),
            ),
        )
        row = conn.execute("SELECT * FROM exercises WHERE id = ?", (exercise_id,)).fetchone()
    return _row_to_exercise(row)


def list_exercises(
    user_id: str,
    window: Optional[Window] = None,
    *,
    exercise_type: Optional[str] = None,
    db_path: Path | None = None,
) -> List[ExerciseEntry]:
    query = "SELECT * FROM exercises WHERE user_id = ?"
    params: List[Any] = [user_id]
    if window is not None and window.start is not None:
        query += " AND performed_at >= ?"
        params.append(to_iso(window.start))
    if window is not None and window.end is not None:
        query += " AND performed_at <= ?"
        params.append(to_iso(window.end))
    if exercise_type:
        query += " AND exercise_type = ?"
        params.append(exercise_type)
    query += " ORDER BY performed_at DESC"

    with db_conn(_db(db_path)) as conn:
        rows = conn.execute(query, params).fetchall()
    return [_row_to_exercise(r) for r in rows]


def update_exercise(
    user_id: str,
    exercise_id: str,
    request: ExerciseUpdateRequest,
    *,
    db_path: Path | None = None,
) -> Optional[ExerciseEntry]:
    changes: Dict[str, Any] = {}
    for key, value in request.model_dump(exclude_unset=True).items():
        if key not in _UPDATABLE or value is None:
            continue
        changes[key] = to_iso(value) if key == "performed_at" else value

    with db_conn(_db(db_path)) as conn:
        if changes:
            assignments = ", ".join(f"{k} = ?" for k in changes)
            cur = conn.execute(
                f"UPDATE exercises SET {assignments} WHERE id = ? AND user_id = ?",
                (*changes.values(), exercise_id, user_id),
            )
            if cur.rowcount == 0:
                return None
        row = conn.execute(
            "SELECT * FROM exercises WHERE id = ? AND user_id = ?", (exercise_id, user_id)
        ).fetchone()
    return _row_to_exercise(row) if row else None


def delete_exercise(user_id: str, exercise_id: str, *, db_path: Path | None = None) -> bool:
    with db_conn(_db(db_path)) as conn:
        cur = conn.execute("DELETE FROM exercises WHERE id = ? AND user_id = ?", (exercise_id, user_id))
        return cur.rowcount > 0


def summarize_day(user_id: str, day: date, *, db_path: Path | None = None) -> ExerciseDaySummary:
    entries = list_exercises(user_id, Window.for_day(day), db_path=db_path)
    return ExerciseDaySummary(
        date=day,
        exercise_count=len(entries),
        total_duration_min=round(sum(e.duration_min for e in entries), 1),
        total_calories_burned=sum(e.calories_burned for e in entries),
    )
