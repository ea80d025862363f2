# -*- coding: utf-8 -*-
"""Water intake — API endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_user
from ..dates import Window, local_now
from .models import WaterEntriesResponse, WaterIncrementRequest, WaterResponse, WaterSetRequest
from .storage import get_water, increment_water, list_water, set_water

router = APIRouter(prefix="/api/water", tags=["Water"])


@router.post("/increment", response_model=WaterResponse, summary="Add glasses to a day's total")
def add_glasses(request: WaterIncrementRequest, user: dict = Depends(get_current_user)):
    entry = increment_water(user["id"], request.date or local_now().date(), request.glasses)
    return WaterResponse(date=entry.date, glasses=entry.glasses)


@router.post("", response_model=WaterResponse, summary="Set a day's total")
def set_glasses(request: WaterSetRequest, user: dict = Depends(get_current_user)):
    entry = set_water(user["id"], request.date or local_now().date(), request.glasses)
    return WaterResponse(date=entry.date, glasses=entry.glasses)


@router.get("/today", response_model=WaterResponse, summary="Today's water intake")
def today(user: dict = Depends(get_current_user)):
    day = local_now().date()
    entry = get_water(user["id"], day)
    return WaterResponse(date=day, glasses=entry.glasses if entry else 0)


@router.get("", response_model=WaterEntriesResponse, summary="List water intake by day")
def list_my_water(
    start: date | None = Query(default=None, description="YYYY-MM-DD"),
    end: date | None = Query(default=None, description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    entries = list_water(user["id"], Window.for_days(start, end))
    return WaterEntriesResponse(count=len(entries), entries=entries)
