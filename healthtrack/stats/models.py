# -*- coding: utf-8 -*-
"""Stats — Pydantic models for aggregated, goal-relative summaries."""

from __future__ import annotations

from datetime import date as date_type, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..weight.models import WeightEntry, WeightUnit


class Period(str, Enum):
    day = "day"
    week = "week"
    month = "month"


class ResolvedGoals(BaseModel):
    """Profile goals with defaults filled in for unset values."""

    calories: int
    protein: float
    carbs: float
    fats: float
    water: int


class NutritionTotals(BaseModel):
    calories: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0


class MacroDistribution(BaseModel):
    protein_calories: float = 0.0
    carbs_calories: float = 0.0
    fats_calories: float = 0.0
    total_calories: float = 0.0
    protein_pct: float = 0.0
    carbs_pct: float = 0.0
    fats_pct: float = 0.0


class TodayTotals(BaseModel):
    calories_consumed: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    calories_burned: int = 0
    net_calories: int = 0
    water_glasses: int = 0
    meal_count: int = 0
    exercise_count: int = 0


class Dashboard(BaseModel):
    date: date_type
    goals: ResolvedGoals
    today: TodayTotals
    latest_weight: Optional[WeightEntry] = None


class PeriodStats(BaseModel):
    period: Period
    start: datetime
    end: datetime
    days: int = Field(..., ge=1)
    days_tracked: int = Field(0, ge=0)
    meal_count: int = 0
    exercise_count: int = 0
    total_calories: int = 0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fats: float = 0.0
    total_fiber: float = 0.0
    calories_burned: int = 0
    net_calories: int = 0
    total_exercise_minutes: float = 0.0
    water_glasses: int = 0
    avg_daily_calories: int = 0
    avg_daily_protein: int = 0
    avg_daily_carbs: int = 0
    avg_daily_fats: int = 0
    avg_daily_water: int = 0
    goals: ResolvedGoals


class MacroStats(BaseModel):
    period: Period
    start: datetime
    end: datetime
    totals: NutritionTotals
    distribution: MacroDistribution


class StreakResponse(BaseModel):
    as_of: date_type
    streak: int = Field(0, ge=0)


class MealDayPoint(BaseModel):
    date: date_type
    meal_count: int
    calories: int
    protein: float
    carbs: float
    fats: float


class ExerciseDayPoint(BaseModel):
    date: date_type
    exercise_count: int
    calories_burned: int
    duration_min: float


class WaterDayPoint(BaseModel):
    date: date_type
    glasses: int


class WeightDayPoint(BaseModel):
    date: date_type
    weight: float
    unit: WeightUnit


class WeeklySeries(BaseModel):
    """Per-day series over the trailing seven days; days without records are absent."""

    start: date_type
    end: date_type
    meals: List[MealDayPoint] = Field(default_factory=list)
    exercise: List[ExerciseDayPoint] = Field(default_factory=list)
    water: List[WaterDayPoint] = Field(default_factory=list)
    weight: List[WeightDayPoint] = Field(default_factory=list)
