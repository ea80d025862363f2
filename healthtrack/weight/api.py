# -*- coding: utf-8 -*-
"""Weight — API endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..dates import Window
from .models import WeightEntriesResponse, WeightEntry, WeightUpdateRequest, WeightUpsertRequest
from .storage import delete_weight, get_latest_weight, list_weights, update_weight, upsert_weight

router = APIRouter(prefix="/api/weight", tags=["Weight"])


@router.post("", response_model=WeightEntry, summary="Record weight for a date (overwrites that date)")
def record_weight(request: WeightUpsertRequest, user: dict = Depends(get_current_user)):
    return upsert_weight(user["id"], request)


@router.get("", response_model=WeightEntriesResponse, summary="Weight history, newest first")
def weight_history(
    start: date | None = Query(default=None, description="YYYY-MM-DD"),
    end: date | None = Query(default=None, description="YYYY-MM-DD"),
    limit: int = Query(default=30, ge=1, le=1000),
    user: dict = Depends(get_current_user),
):
    entries = list_weights(user["id"], Window.for_days(start, end), limit=limit)
    return WeightEntriesResponse(count=len(entries), entries=entries)


@router.get("/latest", response_model=WeightEntry | None, summary="Most recent weight entry")
def latest_weight(user: dict = Depends(get_current_user)):
    return get_latest_weight(user["id"])


@router.patch("/{entry_id}", response_model=WeightEntry, summary="Correct a weight entry")
def patch_weight(entry_id: str, request: WeightUpdateRequest, user: dict = Depends(get_current_user)):
    entry = update_weight(user["id"], entry_id, request)
    if entry is None:
        raise HTTPException(status_code=404, detail="Weight entry not found")
    return entry


@router.delete("/{entry_id}", summary="Delete a weight entry")
def remove_weight(entry_id: str, user: dict = Depends(get_current_user)):
    if not delete_weight(user["id"], entry_id):
        raise HTTPException(status_code=404, detail="Weight entry not found")
    return {"status": "ok"}
