# -*- coding: utf-8 -*-
"""Weight — SQLite storage (at most one entry per user per date)."""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..dates import Window, local_now, to_iso
from .models import WeightEntry, WeightUpdateRequest, WeightUpsertRequest


def _db(db_path: Path | None) -> Path:
    return db_path or settings.db_path


def _row_to_weight(row: sqlite3.Row) -> WeightEntry:
    data = dict(row)
    return WeightEntry(
        id=data["id"],
        user_id=data["user_id"],
        date=date.fromisoformat(data["entry_date"]),
        weight=data["weight"],
        unit=data["unit"],
        notes=data.get("notes"),
        created_at=data["created_at"],
    )


def upsert_weight(user_id: str, request: WeightUpsertRequest, *, db_path: Path | None = None) -> WeightEntry:
    """Record the weight for a date; a second write on the same date overwrites the first."""
    day = (request.date or local_now().date()).isoformat()
    with db_conn(_db(db_path)) as conn:
        conn.execute(
            """
            INSERT INTO weight_entries (id, user_id, entry_date, weight, unit, notes, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, entry_date) DO UPDATE SET
                weight = excluded.weight,
                unit = excluded.unit,
                notes = excluded.notes
            """,
            (str(uuid4()), user_id, day, float(request.weight), request.unit.value, request.notes, to_iso(local_now())),
        )
        row = conn.execute(
            "SELECT * FROM weight_entries WHERE user_id = ? AND entry_date = ?", (user_id, day)
        ).fetchone()
    return _row_to_weight(row)


def update_weight(
    user_id: str,
    entry_id: str,
    request: WeightUpdateRequest,
    *,
    db_path: Path | None = None,
) -> Optional[WeightEntry]:
    changes: Dict[str, Any] = {}
    for key, value in request.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        changes[key] = getattr(value, "value", value)

    with db_conn(_db(db_path)) as conn:
        if changes:
            assignments = ", ".join(f"{k} = ?" for k in changes)
            cur = conn.execute(
                f"UPDATE weight_entries SET {assignments} WHERE id = ? AND user_id = ?",
                (*changes.values(), entry_id, user_id),
            )
            if cur.rowcount == 0:
                return None
        row = conn.execute(
            "SELECT * FROM weight_entries WHERE id = ? AND user_id = ?", (entry_id, user_id)
        ).fetchone()
    return _row_to_weight(row) if row else None


def delete_weight(user_id: str, entry_id: str, *, db_path: Path | None = None) -> bool:
    with db_conn(_db(db_path)) as conn:
        cur = conn.execute("DELETE FROM weight_entries WHERE id = ? AND user_id = ?", (entry_id, user_id))
        return cur.rowcount > 0


def list_weights(
    user_id: str,
    window: Optional[Window] = None,
    *,
    limit: Optional[int] = None,
    db_path: Path | None = None,
) -> List[WeightEntry]:
    """Weight entries newest first; dates are placed at midnight for window checks."""
    query = "SELECT * FROM weight_entries WHERE user_id = ?"
    params: List[Any] = [user_id]
    if window is not None:
        first, last = window.date_bounds()
        if first is not None:
            query += " AND entry_date >= ?"
            params.append(first)
        if last is not None:
            query += " AND entry_date <= ?"
            params.append(last)
    query += " ORDER BY entry_date DESC"

    with db_conn(_db(db_path)) as conn:
        rows = conn.execute(query, params).fetchall()
    entries = [_row_to_weight(r) for r in rows]
    if window is not None:
        entries = [e for e in entries if window.contains_date(e.date)]
    return entries[:limit] if limit is not None else entries


def get_latest_weight(user_id: str, *, db_path: Path | None = None) -> Optional[WeightEntry]:
    with db_conn(_db(db_path)) as conn:
        row = conn.execute(
            "SELECT * FROM weight_entries WHERE user_id = ? ORDER BY entry_date DESC LIMIT 1",
            (user_id,),
        ).fetchone()
    return _row_to_weight(row) if row else None
