# -*- coding: utf-8 -*-
"""Exercise domain — Pydantic models."""

from __future__ import annotations

from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ExerciseEntry(BaseModel):
    id: str
    user_id: str
    performed_at: datetime
    exercise_type: str = "other"
    name: str
    duration_min: float = Field(0.0, ge=0)
    calories_burned: int = Field(0, ge=0)
    distance_km: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    created_at: str


class ExerciseCreateRequest(BaseModel):
    performed_at: Optional[datetime] = Field(None, description="ISO8601; defaults to now")
    exercise_type: str = Field("other", min_length=1, max_length=32, description="cardio|strength|sports|other|...")
    name: str = Field(..., min_length=1, max_length=256)
    duration_min: float = Field(0.0, ge=0)
    calories_burned: int = Field(0, ge=0)
    distance_km: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)


class ExerciseUpdateRequest(BaseModel):
    performed_at: Optional[datetime] = None
    exercise_type: Optional[str] = Field(None, min_length=1, max_length=32)
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    duration_min: Optional[float] = Field(None, ge=0)
    calories_burned: Optional[int] = Field(None, ge=0)
    distance_km: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)


class ExercisesResponse(BaseModel):
    count: int
    exercises: List[ExerciseEntry]


class ExerciseDaySummary(BaseModel):
    date: date_type
    exercise_count: int = Field(0, ge=0)
    total_duration_min: float = Field(0.0, ge=0)
    total_calories_burned: int = Field(0, ge=0)
