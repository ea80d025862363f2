# -*- coding: utf-8 -*-
"""Auth — DB storage helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..dates import local_now, to_iso


def _db(db_path: Path | None) -> Path:
    return db_path or settings.db_path


def get_user_by_email(email: str, *, db_path: Path | None = None) -> Optional[Dict[str, Any]]:
    with db_conn(_db(db_path)) as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email.lower().strip(),)).fetchone()
        return dict(row) if row else None


def get_user_by_id(user_id: str, *, db_path: Path | None = None) -> Optional[Dict[str, Any]]:
    with db_conn(_db(db_path)) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def create_user(*, email: str, password_hash: str, name: str, db_path: Path | None = None) -> Dict[str, Any]:
    user_id = str(uuid4())
    now = to_iso(local_now())
    email_norm = email.lower().strip()
    with db_conn(_db(db_path)) as conn:
        conn.execute(
            "INSERT INTO users (id, email, password_hash, name, created_at) VALUES (?, ?, ?, ?, ?)",
            (user_id, email_norm, password_hash, name, now),
        )
    return {
        "id": user_id,
        "email": email_norm,
        "password_hash": password_hash,
        "name": name,
        "drive_refresh_token": None,
        "created_at": now,
    }


def set_drive_refresh_token(user_id: str, refresh_token: str | None, *, db_path: Path | None = None) -> None:
    with db_conn(_db(db_path)) as conn:
        conn.execute(
            "UPDATE users SET drive_refresh_token = ? WHERE id = ?",
            (refresh_token, user_id),
        )
