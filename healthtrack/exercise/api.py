# -*- coding: utf-8 -*-
"""Exercise domain — API endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..dates import Window, local_now
from .models import (
    ExerciseCreateRequest,
    ExerciseDaySummary,
    ExerciseEntry,
    ExercisesResponse,
    ExerciseUpdateRequest,
)
from .storage import create_exercise, delete_exercise, list_exercises, summarize_day, update_exercise

router = APIRouter(prefix="/api/exercise", tags=["Exercise"])


@router.post("", response_model=ExerciseEntry, summary="Log an exercise")
def log_exercise(request: ExerciseCreateRequest, user: dict = Depends(get_current_user)):
    return create_exercise(user["id"], request)


@router.get("", response_model=ExercisesResponse, summary="List exercises")
def list_my_exercises(
    start: date | None = Query(default=None, description="YYYY-MM-DD"),
    end: date | None = Query(default=None, description="YYYY-MM-DD"),
    exercise_type: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),
):
    entries = list_exercises(user["id"], Window.for_days(start, end), exercise_type=exercise_type)
    return ExercisesResponse(count=len(entries), exercises=entries[offset : offset + limit])


@router.get("/today", response_model=ExerciseDaySummary, summary="Today's exercise totals")
def today_summary(user: dict = Depends(get_current_user)):
    return summarize_day(user["id"], local_now().date())


@router.patch("/{exercise_id}", response_model=ExerciseEntry, summary="Correct an exercise entry")
def patch_exercise(exercise_id: str, request: ExerciseUpdateRequest, user: dict = Depends(get_current_user)):
    entry = update_exercise(user["id"], exercise_id, request)
    if entry is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return entry


@router.delete("/{exercise_id}", summary="Delete an exercise entry")
def remove_exercise(exercise_id: str, user: dict = Depends(get_current_user)):
    if not delete_exercise(user["id"], exercise_id):
        raise HTTPException(status_code=404, detail="Exercise not found")
    return {"status": "ok"}
