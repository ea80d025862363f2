# -*- coding: utf-8 -*-
"""Water intake — SQLite storage.

One row per user per calendar date. ``increment_water`` adds to the day's
count; ``set_water`` replaces it.
"""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path
from typing import Any, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..dates import Window, local_now, to_iso
from .models import WaterEntry


def _db(db_path: Path | None) -> Path:
    return db_path or settings.db_path


def _row_to_water(row: sqlite3.Row) -> WaterEntry:
    data = dict(row)
    return WaterEntry(
        id=data["id"],
        user_id=data["user_id"],
        date=date.fromisoformat(data["entry_date"]),
        glasses=data["glasses"],
        updated_at=data["updated_at"],
    )


def _upsert(user_id: str, day: date, glasses: int, *, accumulate: bool, db_path: Path | None) -> WaterEntry:
    on_conflict = "glasses + excluded.glasses" if accumulate else "excluded.glasses"
    with db_conn(_db(db_path)) as conn:
        conn.execute(
            f"""
            INSERT INTO water_intake (id, user_id, entry_date, glasses, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id, entry_date) DO UPDATE SET
                glasses = {on_conflict},
                updated_at = excluded.updated_at
            """,
            (str(uuid4()), user_id, day.isoformat(), int(glasses), to_iso(local_now())),
        )
        row = conn.execute(
            "SELECT * FROM water_intake WHERE user_id = ? AND entry_date = ?",
            (user_id, day.isoformat()),
        ).fetchone()
    return _row_to_water(row)


def increment_water(user_id: str, day: date, glasses: int = 1, *, db_path: Path | None = None) -> WaterEntry:
    return _upsert(user_id, day, glasses, accumulate=True, db_path=db_path)


def set_water(user_id: str, day: date, glasses: int, *, db_path: Path | None = None) -> WaterEntry:
    return _upsert(user_id, day, glasses, accumulate=False, db_path=db_path)


def get_water(user_id: str, day: date, *, db_path: Path | None = None) -> Optional[WaterEntry]:
    with db_conn(_db(db_path)) as conn:
        row = conn.execute(
            "SELECT * FROM water_intake WHERE user_id = ? AND entry_date = ?",
            (user_id, day.isoformat()),
        ).fetchone()
    return _row_to_water(row) if row else None


def list_water(user_id: str, window: Optional[Window] = None, *, db_path: Path | None = None) -> List[WaterEntry]:
    """Water rows whose date (taken at midnight) lies inside ``window``, oldest first."""
    query = "SELECT * FROM water_intake WHERE user_id = ?"
    params: List[Any] = [user_id]
    if window is not None:
        first, last = window.date_bounds()
        if first is not None:
            query += " AND entry_date >= ?"
            params.append(first)
        if last is not None:
            query += " AND entry_date <= ?"
            params.append(last)
    query += " ORDER BY entry_date ASC"

    with db_conn(_db(db_path)) as conn:
        rows = conn.execute(query, params).fetchall()
    entries = [_row_to_water(r) for r in rows]
    if window is None:
        return entries
    return [e for e in entries if window.contains_date(e.date)]
