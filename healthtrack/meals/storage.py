# -*- coding: utf-8 -*-
"""Meals — SQLite storage."""

from __future__ import annotations

import json
import sqlite3
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..dates import Window, local_now, parse_iso, to_iso
from .models import Confidence, MealCreateRequest, MealDaySummary, MealEntry, MealUpdateRequest

_UPDATABLE = (
    "eaten_at",
    "meal_type",
    "meal_name",
    "food_items",
    "calories",
    "protein",
    "carbs",
    "fats",
    "fiber",
    "sugar",
    "serving_size",
    "notes",
)


def _db(db_path: Path | None) -> Path:
    return db_path or settings.db_path


def _row_to_meal(row: sqlite3.Row) -> MealEntry:
    data = dict(row)
    try:
        food_items = json.loads(data.get("food_items") or "[]")
    except ValueError:
        food_items = []
    return MealEntry(
        id=data["id"],
        user_id=data["user_id"],
        eaten_at=parse_iso(data["eaten_at"]),
        meal_type=data["meal_type"],
        meal_name=data.get("meal_name"),
        food_items=food_items if isinstance(food_items, list) else [],
        calories=data["calories"],
        protein=data["protein"],
        carbs=data["carbs"],
        fats=data["fats"],
        fiber=data["fiber"],
        sugar=data["sugar"],
        serving_size=data.get("serving_size"),
        confidence=data.get("confidence"),
        image_url=data.get("image_url"),
        drive_file_id=data.get("drive_file_id"),
        notes=data.get("notes"),
        created_at=data["created_at"],
    )


def create_meal(
    user_id: str,
    request: MealCreateRequest,
    *,
    confidence: Optional[Confidence] = None,
    drive_file_id: Optional[str] = None,
    db_path: Path | None = None,
) -> MealEntry:
    meal_id = str(uuid4())
    eaten_at = to_iso(request.eaten_at or local_now())
    created_at = to_iso(local_now())
    with db_conn(_db(db_path)) as conn:
        conn.execute(
            """
            INSERT INTO meals (
                id, user_id, eaten_at, meal_type, meal_name, food_items,
                calories, protein, carbs, fats, fiber, sugar,
                serving_size, confidence, image_url, drive_file_id, notes, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                meal_id,
                user_id,
                eaten_at,
                request.meal_type.value,
                request.meal_name,
                json.dumps(request.food_items, ensure_ascii=False),
                int(request.calories),
                float(request.protein),
                float(request.carbs),
                float(request.fats),
                float(request.fiber),
                float(request.sugar),
                request.serving_size,
                confidence.value if confidence else None,
                request.image_url,
                drive_file_id,
                request.notes,
                created_at,
            ),
        )
        row = conn.execute("SELECT * FROM meals WHERE id = ?", (meal_id,)).fetchone()
    return _row_to_meal(row)


def get_meal(user_id: str, meal_id: str, *, db_path: Path | None = None) -> Optional[MealEntry]:
    with db_conn(_db(db_path)) as conn:
        row = conn.execute(
            "SELECT * FROM meals WHERE id = ? AND user_id = ?", (meal_id, user_id)
        ).fetchone()
    return _row_to_meal(row) if row else None


def list_meals(
    user_id: str,
    window: Optional[Window] = None,
    *,
    meal_type: Optional[str] = None,
    db_path: Path | None = None,
) -> List[MealEntry]:
    """Meals for a user, newest first, optionally restricted to ``window`` (inclusive)."""
    query = "SELECT * FROM meals WHERE user_id = ?"
    params: List[Any] = [user_id]
    if window is not None and window.start is not None:
        query += " AND eaten_at >= ?"
        params.append(to_iso(window.start))
    if window is not None and window.end is not None:
        query += " AND eaten_at <= ?"
        params.append(to_iso(window.end))
    if meal_type:
        query += " AND meal_type = ?"
        params.append(meal_type)
    query += " ORDER BY eaten_at DESC"

    with db_conn(_db(db_path)) as conn:
        rows = conn.execute(query, params).fetchall()
    return [_row_to_meal(r) for r in rows]


def update_meal(
    user_id: str,
    meal_id: str,
    request: MealUpdateRequest,
    *,
    db_path: Path | None = None,
) -> Optional[MealEntry]:
    data = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    changes: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in _UPDATABLE:
            continue
        if key == "eaten_at":
            value = to_iso(value)
        elif key == "food_items":
            value = json.dumps(value, ensure_ascii=False)
        elif key == "meal_type":
            value = getattr(value, "value", value)
        changes[key] = value

    with db_conn(_db(db_path)) as conn:
        if changes:
            assignments = ", ".join(f"{k} = ?" for k in changes)
            cur = conn.execute(
                f"UPDATE meals SET {assignments} WHERE id = ? AND user_id = ?",
                (*changes.values(), meal_id, user_id),
            )
            if cur.rowcount == 0:
                return None
        row = conn.execute(
            "SELECT * FROM meals WHERE id = ? AND user_id = ?", (meal_id, user_id)
        ).fetchone()
    return _row_to_meal(row) if row else None


def delete_meal(user_id: str, meal_id: str, *, db_path: Path | None = None) -> bool:
    with db_conn(_db(db_path)) as conn:
        cur = conn.execute("DELETE FROM meals WHERE id = ? AND user_id = ?", (meal_id, user_id))
        return cur.rowcount > 0


def summarize_day(user_id: str, day: date, *, db_path: Path | None = None) -> MealDaySummary:
    meals = list_meals(user_id, Window.for_day(day), db_path=db_path)
    return MealDaySummary(
        date=day,
        meal_count=len(meals),
        total_calories=sum(m.calories for m in meals),
        total_protein=round(sum(m.protein for m in meals), 1),
        total_carbs=round(sum(m.carbs for m in meals), 1),
        total_fats=round(sum(m.fats for m in meals), 1),
    )
