# -*- coding: utf-8 -*-
"""Stats — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..dates import local_now
from ..errors import InvalidPeriod
from .engine import StatsEngine
from .models import Dashboard, MacroStats, PeriodStats, StreakResponse, WeeklySeries
from .store import SQLiteRecordStore

router = APIRouter(prefix="/api/stats", tags=["Stats"])


def get_stats_engine() -> StatsEngine:
    return StatsEngine(SQLiteRecordStore())


@router.get("/dashboard", response_model=Dashboard, summary="Today's totals, goals and latest weight")
def dashboard(user: dict = Depends(get_current_user), engine: StatsEngine = Depends(get_stats_engine)):
    return engine.compute_dashboard(user["id"])


@router.get("/period", response_model=PeriodStats, summary="Totals and daily averages for day|week|month")
def period_stats(
    period: str = Query(default="week", description="day|week|month"),
    user: dict = Depends(get_current_user),
    engine: StatsEngine = Depends(get_stats_engine),
):
    try:
        return engine.compute_period_stats(user["id"], period)
    except InvalidPeriod as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/macros", response_model=MacroStats, summary="Macro calorie split for day|week|month")
def macro_stats(
    period: str = Query(default="week", description="day|week|month"),
    user: dict = Depends(get_current_user),
    engine: StatsEngine = Depends(get_stats_engine),
):
    try:
        return engine.compute_period_macros(user["id"], period)
    except InvalidPeriod as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/weekly", response_model=WeeklySeries, summary="Per-day series for the trailing seven days")
def weekly(user: dict = Depends(get_current_user), engine: StatsEngine = Depends(get_stats_engine)):
    return engine.compute_weekly_series(user["id"])


@router.get("/streak", response_model=StreakResponse, summary="Consecutive days with a logged meal")
def streak(user: dict = Depends(get_current_user), engine: StatsEngine = Depends(get_stats_engine)):
    now = local_now()
    return StreakResponse(as_of=now.date(), streak=engine.compute_streak(user["id"], now))
