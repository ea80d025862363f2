# -*- coding: utf-8 -*-
"""App database — SQLite helpers.

Every table except ``users`` is keyed by ``user_id`` and cascades on user delete.
Timestamps are naive local ISO8601 strings (``YYYY-MM-DDTHH:MM:SS``) so that
lexicographic order equals chronological order.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                name TEXT NOT NULL,
                drive_refresh_token TEXT,
                created_at TEXT NOT NULL
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS profiles (
                user_id TEXT PRIMARY KEY,
                name TEXT,
                age INTEGER,
                gender TEXT,
                height_cm REAL,
                target_weight REAL,
                activity_level TEXT,
                daily_calorie_goal INTEGER,
                protein_goal REAL,
                carbs_goal REAL,
                fats_goal REAL,
                water_goal INTEGER,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS meals (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                eaten_at TEXT NOT NULL,
                meal_type TEXT NOT NULL,
                meal_name TEXT,
                food_items TEXT NOT NULL,
                calories INTEGER NOT NULL DEFAULT 0,
                protein REAL NOT NULL DEFAULT 0,
                carbs REAL NOT NULL DEFAULT 0,
                fats REAL NOT NULL DEFAULT 0,
                fiber REAL NOT NULL DEFAULT 0,
                sugar REAL NOT NULL DEFAULT 0,
                serving_size TEXT,
                confidence TEXT,
                image_url TEXT,
                drive_file_id TEXT,
                notes TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_meals_user_eaten ON meals(user_id, eaten_at DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS exercises (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                performed_at TEXT NOT NULL,
                exercise_type TEXT NOT NULL,
                name TEXT NOT NULL,
                duration_min REAL NOT NULL DEFAULT 0,
                calories_burned INTEGER NOT NULL DEFAULT 0,
                distance_km REAL,
                notes TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_exercises_user_performed ON exercises(user_id, performed_at DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS water_intake (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                entry_date TEXT NOT NULL,
                glasses INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT NOT NULL,
                UNIQUE (user_id, entry_date),
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS weight_entries (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                entry_date TEXT NOT NULL,
                weight REAL NOT NULL,
                unit TEXT NOT NULL DEFAULT 'kg',
                notes TEXT,
                created_at TEXT NOT NULL,
                UNIQUE (user_id, entry_date),
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Open a connection, commit on success, and surface SQLite failures as ``StoreUnavailable``."""
    try:
        conn = connect(db_path)
    except (sqlite3.Error, OSError) as exc:
        logger.error("record store unavailable at %s: %s", db_path, exc)
        raise StoreUnavailable(f"Cannot open record store: {exc}") from exc
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as exc:
        logger.error("record store query failed: %s", exc)
        raise StoreUnavailable(f"Record store query failed: {exc}") from exc
    finally:
        conn.close()
