# -*- coding: utf-8 -*-
"""Profile — SQLite storage (one row per user, created on first access)."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from ..dates import local_now, to_iso
from .models import (
    DEFAULT_CALORIE_GOAL,
    DEFAULT_CARBS_GOAL,
    DEFAULT_FATS_GOAL,
    DEFAULT_PROTEIN_GOAL,
    DEFAULT_WATER_GOAL,
    Goals,
    Profile,
    ProfileUpdateRequest,
)

logger = logging.getLogger(__name__)

_FIELDS = (
    "name",
    "age",
    "gender",
    "height_cm",
    "target_weight",
    "activity_level",
    "daily_calorie_goal",
    "protein_goal",
    "carbs_goal",
    "fats_goal",
    "water_goal",
)


def _db(db_path: Path | None) -> Path:
    return db_path or settings.db_path


def _row_to_profile(row: sqlite3.Row, drive_connected: bool) -> Profile:
    data = dict(row)
    data.pop("drive_refresh_token", None)
    return Profile(**data, drive_connected=drive_connected)


def _fetch(conn: sqlite3.Connection, user_id: str) -> Optional[sqlite3.Row]:
    return conn.execute(
        """
        SELECT p.*, u.drive_refresh_token
        FROM profiles p LEFT JOIN users u ON u.id = p.user_id
        WHERE p.user_id = ?
        """,
        (user_id,),
    ).fetchone()


def _insert_defaults(conn: sqlite3.Connection, user_id: str, overrides: Dict[str, Any]) -> None:
    now = to_iso(local_now())
    values: Dict[str, Any] = {
        "daily_calorie_goal": DEFAULT_CALORIE_GOAL,
        "protein_goal": DEFAULT_PROTEIN_GOAL,
        "carbs_goal": DEFAULT_CARBS_GOAL,
        "fats_goal": DEFAULT_FATS_GOAL,
        "water_goal": DEFAULT_WATER_GOAL,
    }
    values.update({k: v for k, v in overrides.items() if k in _FIELDS and v is not None})
    cols = ["user_id", *values.keys(), "created_at", "updated_at"]
    conn.execute(
        f"INSERT OR IGNORE INTO profiles ({', '.join(cols)}) VALUES ({', '.join('?' for _ in cols)})",
        (user_id, *values.values(), now, now),
    )


def create_profile(user_id: str, overrides: Optional[Dict[str, Any]] = None, *, db_path: Path | None = None) -> Profile:
    with db_conn(_db(db_path)) as conn:
        _insert_defaults(conn, user_id, overrides or {})
        row = _fetch(conn, user_id)
    return _row_to_profile(row, bool(row["drive_refresh_token"]))


def get_profile(user_id: str, *, db_path: Path | None = None) -> Profile:
    with db_conn(_db(db_path)) as conn:
        row = _fetch(conn, user_id)
        if row is None:
            logger.info("creating default profile for user %s", user_id)
            _insert_defaults(conn, user_id, {})
            row = _fetch(conn, user_id)
    return _row_to_profile(row, bool(row["drive_refresh_token"]))


def update_profile(user_id: str, request: ProfileUpdateRequest, *, db_path: Path | None = None) -> Profile:
    changes = {
        k: v
        for k, v in request.model_dump(exclude_unset=True).items()
        if k in _FIELDS and v is not None
    }
    with db_conn(_db(db_path)) as conn:
        if _fetch(conn, user_id) is None:
            _insert_defaults(conn, user_id, {})
        if changes:
            assignments = ", ".join(f"{k} = ?" for k in changes)
            conn.execute(
                f"UPDATE profiles SET {assignments}, updated_at = ? WHERE user_id = ?",
                (*changes.values(), to_iso(local_now()), user_id),
            )
        row = _fetch(conn, user_id)
    return _row_to_profile(row, bool(row["drive_refresh_token"]))


def get_goals(user_id: str, *, db_path: Path | None = None) -> Goals:
    with db_conn(_db(db_path)) as conn:
        row = conn.execute(
            """
            SELECT daily_calorie_goal, protein_goal, carbs_goal, fats_goal, water_goal
            FROM profiles WHERE user_id = ?
            """,
            (user_id,),
        ).fetchone()
    if row is None:
        return Goals()
    return Goals(**dict(row))
